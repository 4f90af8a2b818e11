import itertools
import logging
from typing import Any, Dict, List, Optional

import numpy as np
from joblib import Parallel, delayed

from modules.evolution_engine.initial_pool import build_initial_pool
from modules.evolution_engine.stopping_criteria import StoppingCriteria
from modules.mutation_engine import CandidateMutator, MutationPolicy
from modules.population import EvaluationResult, Population, best_result, rank
from modules.search_space import Candidate, HyperparameterSchema, SearchBoundaries
from modules.trainer.base_trainer import run_trial
from utils import constants
from utils.exceptions import EvolutionError
from utils.seeding import resolve_seeds


class BatchEvolutionScheduler:
    """
    Generation-synchronous evolution.

    Seeding -> Evaluating(g) -> Selecting(g) -> Mutating(g) -> Evaluating(g+1) -> ... -> Done

    A generation is evaluated with at most ``parallelism`` concurrent trainer
    calls and fully collected before any parent selection or mutation happens,
    so two generations never have evaluations in flight at the same time.
    """

    def __init__(self, tuning_config: Dict[str, Any], schema: HyperparameterSchema,
                 boundaries: SearchBoundaries, trainer: Any, logger: logging.Logger,
                 population: Optional[Population] = None,
                 max_permutations: int = constants.DEFAULT_MAX_PERMUTATIONS):
        self.tuning_config = tuning_config
        self.batch_config = tuning_config['batch']
        self.schema = schema
        self.boundaries = boundaries
        self.trainer = trainer
        self.logger = logger
        self.population = population if population is not None else Population()
        self.max_permutations = max_permutations

        self.optimization_strategy = tuning_config['scoring_optimization_strategy']
        self.parallelism = int(self.batch_config['parallelism'])
        self.number_of_generations = int(self.batch_config['number_of_generations'])
        self.mutations_per_generation = int(self.batch_config['number_of_mutations_per_generation'])
        self.parents_to_retain = int(self.batch_config['number_of_parents_to_retain'])

        auto_stop_score = self.batch_config.get('auto_stopping_score')
        self.stopping = StoppingCriteria(
            self.optimization_strategy,
            auto_stop_score if self.batch_config.get('auto_stopping_flag', False) else None,
            logger,
        )

        policy = MutationPolicy(
            strategy=self.batch_config['generational_mutation_strategy'],
            magnitude_mode=self.batch_config['mutation_magnitude_mode'],
            fixed_mutation_value=int(self.batch_config['fixed_mutation_value']),
            decrement=int(self.batch_config.get('mutation_decrement', 1)),
        )
        self.mutator = CandidateMutator(
            schema, boundaries, float(self.batch_config['genetic_mixing']), policy,
            np.random.default_rng(resolve_seeds(tuning_config)['mutation']), logger,
        )

        self._sequence = itertools.count()
        self.generations_completed = 0
        self.stop_reason = ""

    def execute(self) -> Population:
        """
        Run every generation (or until auto-stopping fires at a generation boundary).

        Raises:
            EvolutionError: when no eligible parent exists to mutate from.
        """
        self.logger.info(
            f"Starting batch evolution for {self.schema.family}: {self.number_of_generations} generations, "
            f"{self.mutations_per_generation} mutations/generation, parallelism {self.parallelism}"
        )
        candidates = build_initial_pool(
            self.tuning_config, self.schema, self.boundaries, self.logger, self.max_permutations
        )

        for generation in range(self.number_of_generations):
            results = self._evaluate_generation(candidates, generation)
            self.population.extend(results)
            self.generations_completed = generation + 1
            self._log_generation(generation, results)

            stop, reason = self.stopping.score_reached(best_result(results, self.optimization_strategy))
            if stop:
                self.stop_reason = reason
                self.logger.info(f"Auto-stopping after generation {generation}: {reason}")
                break

            if generation == self.number_of_generations - 1:
                self.stop_reason = f"Completed all {self.number_of_generations} generations"
                break

            parents = self._select_parents(generation)
            candidates = [
                self.mutator.breed(parents, generation) for _ in range(self.mutations_per_generation)
            ]

        return self.population

    def _evaluate_generation(self, candidates: List[Candidate], generation: int) -> List[EvaluationResult]:
        """Evaluate one generation; returns only once every member has come back."""
        tagged = [(candidate, next(self._sequence)) for candidate in candidates]
        self.logger.info(f"Generation {generation}: evaluating {len(tagged)} candidates")
        return Parallel(n_jobs=self.parallelism, backend="threading")(
            delayed(run_trial)(self.trainer, candidate, generation, sequence_id, self.logger)
            for candidate, sequence_id in tagged
        )

    def _select_parents(self, generation: int) -> List[Candidate]:
        ranked = rank(self.population.snapshot(), self.optimization_strategy)
        if not ranked:
            raise EvolutionError(
                f"No eligible parents after generation {generation}: every evaluation so far has failed.",
                population=self.population,
            )
        parents = ranked[:self.parents_to_retain]
        self.logger.debug(
            f"Generation {generation}: retained {len(parents)} parents, "
            f"scores {[round(p.score, 6) for p in parents]}"
        )
        return [p.candidate for p in parents]

    def _log_generation(self, generation: int, results: List[EvaluationResult]) -> None:
        scores = [r.score for r in results if r.eligible]
        failed = len(results) - len(scores)
        if scores:
            best = best_result(results, self.optimization_strategy)
            self.logger.info(
                f"Generation {generation} complete: mean {np.mean(scores):.6g}, std {np.std(scores):.6g}, "
                f"best {best.score:.6g}, failed {failed}"
            )
        else:
            self.logger.warning(f"Generation {generation} complete: all {failed} evaluations failed")
