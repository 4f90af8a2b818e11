from typing import Any, Dict

# Large, non-overlapping offsets keep the random streams uncorrelated
SAMPLING_SEED_OFFSET = 0
MUTATION_SEED_OFFSET = 1000
TRAINER_SEED_OFFSET = 2000


def derive_seeds(master_seed: int) -> Dict[str, int]:
    """Component seeds propagated from the master seed."""
    return {
        'sampling': master_seed + SAMPLING_SEED_OFFSET,
        'mutation': master_seed + MUTATION_SEED_OFFSET,
        'trainer': master_seed + TRAINER_SEED_OFFSET,
    }


def resolve_seeds(tuning_config: Dict[str, Any]) -> Dict[str, int]:
    """Seeds propagated by the ConfigurationManager, or derived from the master seed."""
    seeds = tuning_config.get('_internal_seeds')
    if seeds:
        return seeds
    return derive_seeds(int(tuning_config.get('seed', 42)))
