import logging
from typing import Any, Optional, Sequence

import numpy as np

from modules.mutation_engine.mutation_policy import MutationPolicy
from modules.permutation_generator import random_candidate
from modules.search_space import Candidate, Dimension, HyperparameterSchema, SearchBoundaries
from utils import constants
from utils.exceptions import ConfigurationError


class CandidateMutator:
    """
    Produces child candidates from parent material plus controlled randomness.

    For each mutated dimension:
    - continuous: child = parent * mix + counterpart * (1 - mix), clamped to the boundary.
    - integer: same blend, rounded to the nearest integer and clamped.
    - categorical/boolean: keep the parent value with probability mix, otherwise
      draw uniformly from the allowed values.
    Unmutated dimensions copy the primary parent exactly.

    The counterpart is a second parent when one is supplied, otherwise a fresh
    uniform draw from the boundaries.
    """

    def __init__(self, schema: HyperparameterSchema, boundaries: SearchBoundaries,
                 genetic_mixing: float, policy: MutationPolicy, rng: np.random.Generator,
                 logger: Optional[logging.Logger] = None):
        if not (0.0 <= genetic_mixing <= 1.0):
            raise ConfigurationError(f"genetic_mixing must be in [0, 1], got {genetic_mixing}")
        self.schema = schema
        self.boundaries = boundaries
        self.genetic_mixing = genetic_mixing
        self.policy = policy
        self.rng = rng
        self.logger = logger or logging.getLogger(__name__)

    def mutate(self, primary: Candidate, generation: int = 0,
               secondary: Optional[Candidate] = None) -> Candidate:
        """Build one child from the primary parent (and optional second parent)."""
        counterpart = secondary if secondary is not None else random_candidate(
            self.schema, self.boundaries, self.rng
        )
        dimension_count = len(self.schema)
        count = self.policy.mutation_count(generation, dimension_count, self.rng)
        mutated_positions = set(
            int(i) for i in self.rng.choice(dimension_count, size=count, replace=False)
        )

        values = []
        for pos, dim in enumerate(self.schema):
            parent_value = primary[dim.name]
            if pos in mutated_positions:
                value = self._mutate_value(dim, parent_value, counterpart[dim.name])
            else:
                value = parent_value
            values.append((dim.name, value))
        return Candidate(tuple(values))

    def breed(self, parents: Sequence[Candidate], generation: int = 0) -> Candidate:
        """
        Draw a primary parent uniformly from the pool and, when more than one parent
        is retained, an independent second draw as the blending counterpart.
        """
        if not parents:
            raise ValueError("Cannot breed from an empty parent pool.")
        primary = parents[int(self.rng.integers(len(parents)))]
        secondary = parents[int(self.rng.integers(len(parents)))] if len(parents) > 1 else None
        return self.mutate(primary, generation, secondary)

    def _mutate_value(self, dim: Dimension, parent_value: Any, other_value: Any) -> Any:
        mix = self.genetic_mixing
        if dim.kind == constants.NUMERIC_CONTINUOUS:
            low, high = self.boundaries.bounds(dim.name)
            blended = parent_value * mix + other_value * (1.0 - mix)
            return float(min(max(blended, low), high))

        if dim.kind == constants.NUMERIC_INTEGER:
            low, high = self.boundaries.integer_bounds(dim.name)
            blended = parent_value * mix + other_value * (1.0 - mix)
            return int(min(max(int(round(blended)), low), high))

        if self.rng.random() < mix:
            return parent_value
        allowed = self.boundaries.allowed_values(dim)
        return allowed[int(self.rng.integers(len(allowed)))]
