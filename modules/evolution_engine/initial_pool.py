import logging
from typing import Any, Dict, List

import numpy as np

from modules.permutation_generator import PermutationGenerator, random_candidate
from modules.search_space import Candidate, HyperparameterSchema, SearchBoundaries
from utils import constants
from utils.exceptions import ConfigurationError
from utils.seeding import resolve_seeds


def build_initial_pool(tuning_config: Dict[str, Any], schema: HyperparameterSchema,
                       boundaries: SearchBoundaries, logger: logging.Logger,
                       max_permutations: int = constants.DEFAULT_MAX_PERMUTATIONS) -> List[Candidate]:
    """
    Draw the first-generation gene pool.

    Modes:
    - permutations: seeded sample of the discretized permutation space.
    - random: uniform draws straight from the boundaries.
    """
    size = int(tuning_config['first_generation_gene_pool'])
    mode = tuning_config.get('first_gen_mode', constants.FIRST_GEN_PERMUTATIONS)
    seed = resolve_seeds(tuning_config)['sampling']

    if mode == constants.FIRST_GEN_PERMUTATIONS:
        generator = PermutationGenerator(
            schema, boundaries, int(tuning_config['first_gen_permutations']),
            max_permutations=max_permutations, logger=logger,
        )
        pool = generator.sample_space(size, seed)
        space_size = generator.space_size()
        if space_size < size:
            logger.warning(
                f"Permutation space ({space_size}) is smaller than first_generation_gene_pool "
                f"({size}); seeding with the full space."
            )
    elif mode == constants.FIRST_GEN_RANDOM:
        rng = np.random.default_rng(seed)
        pool = [random_candidate(schema, boundaries, rng) for _ in range(size)]
    else:
        raise ConfigurationError(
            f"first_gen_mode must be one of {list(constants.FIRST_GEN_MODES)}, got '{mode}'"
        )

    logger.info(f"Seeded gene pool with {len(pool)} candidates ({mode} mode)")
    return pool
