import numpy as np

from utils import constants
from utils.exceptions import ConfigurationError


class MutationPolicy:
    """
    Decides how many dimensions of a child are mutated for a given generation.

    Strategies:
    - linear: max_mutable = max(1, D - generation * decrement), decaying each generation.
    - fixed: max_mutable = fixed_mutation_value for every generation.

    Magnitude modes:
    - random: draw the count uniformly from [1, max_mutable].
    - fixed: use max_mutable directly.
    """

    def __init__(self, strategy: str = constants.MUTATION_LINEAR,
                 magnitude_mode: str = constants.MAGNITUDE_FIXED,
                 fixed_mutation_value: int = 1, decrement: int = 1):
        if strategy not in constants.GENERATIONAL_MUTATION_STRATEGIES:
            raise ConfigurationError(
                f"generational_mutation_strategy must be one of "
                f"{list(constants.GENERATIONAL_MUTATION_STRATEGIES)}, got '{strategy}'"
            )
        if magnitude_mode not in constants.MUTATION_MAGNITUDE_MODES:
            raise ConfigurationError(
                f"mutation_magnitude_mode must be one of "
                f"{list(constants.MUTATION_MAGNITUDE_MODES)}, got '{magnitude_mode}'"
            )
        if fixed_mutation_value < 1:
            raise ConfigurationError(f"fixed_mutation_value must be >= 1, got {fixed_mutation_value}")
        if decrement < 0:
            raise ConfigurationError(f"mutation_decrement must be >= 0, got {decrement}")

        self.strategy = strategy
        self.magnitude_mode = magnitude_mode
        self.fixed_mutation_value = fixed_mutation_value
        self.decrement = decrement

    @classmethod
    def fixed(cls, count: int) -> 'MutationPolicy':
        """Constant mutation count with no decay (continuous evolution)."""
        return cls(constants.MUTATION_FIXED, constants.MAGNITUDE_FIXED, fixed_mutation_value=count)

    def max_mutable(self, generation: int, dimension_count: int) -> int:
        if self.strategy == constants.MUTATION_LINEAR:
            value = max(1, dimension_count - generation * self.decrement)
        else:
            value = self.fixed_mutation_value
        return max(1, min(value, dimension_count))

    def mutation_count(self, generation: int, dimension_count: int, rng: np.random.Generator) -> int:
        upper = self.max_mutable(generation, dimension_count)
        if self.magnitude_mode == constants.MAGNITUDE_RANDOM:
            return int(rng.integers(1, upper + 1))
        return upper

    def __repr__(self) -> str:
        return (f"MutationPolicy(strategy={self.strategy!r}, magnitude_mode={self.magnitude_mode!r}, "
                f"fixed_mutation_value={self.fixed_mutation_value}, decrement={self.decrement})")
