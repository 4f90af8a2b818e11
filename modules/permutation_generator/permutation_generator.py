import itertools
import math
import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from modules.search_space import (
    Candidate,
    HyperparameterSchema,
    SearchBoundaries,
    discretize,
)
from utils import constants
from utils.exceptions import ConfigurationError


# Largest population numpy can draw distinct indices from
INDEX_LIMIT = int(np.iinfo(np.int64).max)


def _draw_indices(population_size: int, count_target: int, seed: int) -> List[int]:
    """Seeded uniform draw of distinct indices from range(population_size)."""
    rng = np.random.default_rng(seed)
    return [int(i) for i in rng.choice(population_size, size=count_target, replace=False)]


def sample(full_space: Sequence[Candidate], count_target: int, seed: int) -> List[Candidate]:
    """
    Seeded uniform random sample without replacement.

    Returns the full space unchanged when count_target >= len(full_space).
    Same seed and same full space always yield the same sample.
    """
    if count_target < 0:
        raise ConfigurationError(f"Sample count target must be >= 0, got {count_target}.")
    population = list(full_space)
    if count_target >= len(population):
        return population
    return [population[i] for i in _draw_indices(len(population), count_target, seed)]


def random_candidate(schema: HyperparameterSchema, boundaries: SearchBoundaries,
                     rng: np.random.Generator) -> Candidate:
    """Uniform draw from the raw boundaries, one value per schema dimension."""
    values = []
    for dim in schema:
        if dim.kind == constants.NUMERIC_CONTINUOUS:
            low, high = boundaries.bounds(dim.name)
            value = float(rng.uniform(low, high)) if high > low else float(low)
            value = min(max(value, low), high)
        elif dim.kind == constants.NUMERIC_INTEGER:
            low, high = boundaries.integer_bounds(dim.name)
            value = int(rng.integers(low, high + 1))
        else:
            allowed = boundaries.allowed_values(dim)
            value = allowed[int(rng.integers(len(allowed)))]
        values.append((dim.name, value))
    return Candidate(tuple(values))


class PermutationGenerator:
    """
    Materializes and subsamples the configuration space of one model family.

    Each dimension is discretized once at construction; the Cartesian product
    follows schema dimension order with the last dimension varying fastest.
    """

    def __init__(self, schema: HyperparameterSchema, boundaries: SearchBoundaries,
                 points_per_dimension: int,
                 max_permutations: int = constants.DEFAULT_MAX_PERMUTATIONS,
                 logger: Optional[logging.Logger] = None):
        self.schema = schema
        self.boundaries = boundaries
        self.points_per_dimension = points_per_dimension
        self.max_permutations = max_permutations
        self.logger = logger or logging.getLogger(__name__)

        boundaries.validate(schema)
        self.value_arrays: Dict[str, List[Any]] = {
            dim.name: discretize(dim, boundaries, points_per_dimension) for dim in schema
        }

    def space_size(self) -> int:
        """Number of permutations in the full space, without materializing it."""
        return math.prod(len(values) for values in self.value_arrays.values())

    def build_full_space(self) -> List[Candidate]:
        """Full Cartesian product of every dimension's discretized values."""
        size = self.space_size()
        if size > self.max_permutations:
            raise ConfigurationError(
                f"Permutation space for '{self.schema.family}' has {size} entries, exceeding "
                f"the safety limit ({self.max_permutations}). Reduce first_gen_permutations or "
                f"increase 'resources.max_permutations'."
            )
        names = self.schema.names
        arrays = [self.value_arrays[name] for name in names]
        return [Candidate(tuple(zip(names, combo))) for combo in itertools.product(*arrays)]

    def candidate_at(self, index: int) -> Candidate:
        """Decode a product index into its Candidate (mixed-radix, last dimension fastest)."""
        names = self.schema.names
        picked = [None] * len(names)
        remainder = index
        for pos in range(len(names) - 1, -1, -1):
            values = self.value_arrays[names[pos]]
            remainder, digit = divmod(remainder, len(values))
            picked[pos] = (names[pos], values[digit])
        return Candidate(tuple(picked))

    def sample_space(self, count_target: int, seed: int) -> List[Candidate]:
        """
        Equivalent to ``sample(self.build_full_space(), count_target, seed)`` but only
        decodes the drawn indices, so spaces beyond the materialization limit stay usable.
        """
        if count_target < 0:
            raise ConfigurationError(f"Sample count target must be >= 0, got {count_target}.")
        size = self.space_size()
        if count_target >= size:
            return [self.candidate_at(i) for i in range(size)]
        if size > INDEX_LIMIT:
            drawn = self._draw_distinct(count_target, seed)
        else:
            drawn = [self.candidate_at(i) for i in _draw_indices(size, count_target, seed)]
        self.logger.debug(f"Sampled {len(drawn)} of {size} permutations for {self.schema.family}")
        return drawn

    def _draw_distinct(self, count_target: int, seed: int) -> List[Candidate]:
        """Draw one grid point per dimension at a time, rejecting repeats (spaces beyond int64)."""
        rng = np.random.default_rng(seed)
        names = self.schema.names
        seen = set()
        drawn = []
        while len(drawn) < count_target:
            candidate = Candidate(tuple(
                (name, self.value_arrays[name][int(rng.integers(len(self.value_arrays[name])))])
                for name in names
            ))
            if candidate not in seen:
                seen.add(candidate)
                drawn.append(candidate)
        return drawn
