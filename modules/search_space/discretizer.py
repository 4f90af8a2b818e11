"""
Turns numeric (low, high) boundary declarations into finite candidate value arrays.
"""
import math
from typing import List

import numpy as np

from modules.search_space.boundaries import SearchBoundaries
from modules.search_space.schemas import Dimension
from utils import constants
from utils.exceptions import ConfigurationError


def _check_inputs(low: float, high: float, n: int) -> None:
    if n < 2:
        raise ConfigurationError(f"Point count per dimension must be >= 2, got {n}.")
    if low > high:
        raise ConfigurationError(f"Invalid boundary: low ({low}) > high ({high}).")


def linear_space(low: float, high: float, n: int) -> List[float]:
    """Evenly spaced points from low to high, both inclusive."""
    _check_inputs(low, high, n)
    if low == high:
        return [float(low)]
    return [float(v) for v in np.linspace(low, high, n)]


def log_space(low: float, high: float, n: int) -> List[float]:
    """Evenly spaced points in the log10 domain, exponentiated back."""
    _check_inputs(low, high, n)
    if low <= 0:
        raise ConfigurationError(f"Log space requires low > 0, got {low}.")
    if low == high:
        return [float(low)]
    values = np.logspace(math.log10(low), math.log10(high), n)
    # Round-trip through log10 drifts the endpoints
    values[0] = low
    values[-1] = high
    return [float(v) for v in np.clip(values, low, high)]


def integer_space(low: float, high: float, n: int) -> List[int]:
    """
    Linear space over the integers inside [low, high], rounded.

    Duplicates produced by rounding are collapsed unless that would leave
    fewer than two elements.
    """
    _check_inputs(low, high, n)
    if low == high:
        return [int(round(low))]
    int_low, int_high = int(math.ceil(low)), int(math.floor(high))
    if int_low > int_high:
        raise ConfigurationError(f"Integer boundary ({low}, {high}) contains no integer.")

    rounded = [int(v) for v in np.rint(np.linspace(int_low, int_high, n))]
    unique = list(dict.fromkeys(rounded))
    if len(unique) >= 2:
        return unique
    return rounded[:2]


def discretize(dimension: Dimension, boundaries: SearchBoundaries, n: int) -> list:
    """Value array for any dimension kind."""
    if dimension.kind == constants.NUMERIC_INTEGER:
        low, high = boundaries.bounds(dimension.name)
        return integer_space(low, high, n)
    if dimension.kind == constants.NUMERIC_CONTINUOUS:
        low, high = boundaries.bounds(dimension.name)
        if dimension.scale == constants.LOG_SCALE:
            return log_space(low, high, n)
        return linear_space(low, high, n)
    values = boundaries.allowed_values(dimension)
    if not values:
        raise ConfigurationError(f"Categorical boundary for '{dimension.name}' is empty.")
    return list(values)
