import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from modules.search_space.schemas import Dimension, HyperparameterSchema
from utils import constants
from utils.exceptions import ConfigurationError


class SearchBoundaries:
    """
    Numeric (low, high) ranges and categorical allowed-value lists for a search space.

    Boolean dimensions need no entry; their values are always (True, False).
    """

    BOOLEAN_VALUES = (True, False)

    def __init__(self, numeric: Optional[Mapping[str, Sequence[float]]] = None,
                 categorical: Optional[Mapping[str, Sequence[Any]]] = None):
        self.numeric: Dict[str, Tuple[float, float]] = {}
        for name, bounds in (numeric or {}).items():
            if isinstance(bounds, str) or not hasattr(bounds, '__len__') or len(bounds) != 2:
                raise ConfigurationError(
                    f"numeric_boundaries['{name}'] must be a [low, high] pair, got {bounds!r}"
                )
            self.numeric[name] = (float(bounds[0]), float(bounds[1]))
        self.categorical: Dict[str, List[Any]] = {
            name: list(values) for name, values in (categorical or {}).items()
        }

    def __repr__(self) -> str:
        return f"SearchBoundaries(numeric={self.numeric}, categorical={self.categorical})"

    def bounds(self, name: str) -> Tuple[float, float]:
        return self.numeric[name]

    def allowed_values(self, dimension: Dimension) -> List[Any]:
        """Allowed values for a categorical or boolean dimension."""
        if dimension.kind == constants.BOOLEAN:
            return list(self.BOOLEAN_VALUES)
        return self.categorical[dimension.name]

    def integer_bounds(self, name: str) -> Tuple[int, int]:
        low, high = self.numeric[name]
        return int(math.ceil(low)), int(math.floor(high))

    def validate(self, schema: HyperparameterSchema) -> None:
        """
        Check that every schema dimension is covered and every range is usable.

        Raises:
            ConfigurationError: naming the first offending dimension.
        """
        for dim in schema:
            if dim.is_numeric:
                if dim.name not in self.numeric:
                    raise ConfigurationError(
                        f"Missing numeric boundary for dimension '{dim.name}' of family '{schema.family}'."
                    )
                low, high = self.numeric[dim.name]
                if not (math.isfinite(low) and math.isfinite(high)):
                    raise ConfigurationError(f"Boundary for '{dim.name}' must be finite, got ({low}, {high}).")
                if low > high:
                    raise ConfigurationError(
                        f"Boundary for '{dim.name}' is empty: low ({low}) > high ({high})."
                    )
                if dim.scale == constants.LOG_SCALE and low <= 0:
                    raise ConfigurationError(
                        f"Log-scaled dimension '{dim.name}' requires low > 0, got {low}."
                    )
                if dim.kind == constants.NUMERIC_INTEGER:
                    int_low, int_high = self.integer_bounds(dim.name)
                    if int_low > int_high:
                        raise ConfigurationError(
                            f"Integer dimension '{dim.name}' boundary ({low}, {high}) contains no integer."
                        )
            elif dim.kind == constants.CATEGORICAL:
                if dim.name not in self.categorical:
                    raise ConfigurationError(
                        f"Missing categorical boundary for dimension '{dim.name}' of family '{schema.family}'."
                    )
                if not self.categorical[dim.name]:
                    raise ConfigurationError(f"Categorical boundary for '{dim.name}' is empty.")

    def contains(self, dimension: Dimension, value: Any) -> bool:
        """True when the value lies inside the dimension's declared boundary."""
        if dimension.is_numeric:
            low, high = self.numeric[dimension.name]
            return low <= value <= high
        return value in self.allowed_values(dimension)
