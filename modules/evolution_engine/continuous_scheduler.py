import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional

import numpy as np

from modules.evolution_engine.initial_pool import build_initial_pool
from modules.evolution_engine.stopping_criteria import StoppingCriteria
from modules.mutation_engine import CandidateMutator, MutationPolicy
from modules.population import EvaluationResult, Population, RunState
from modules.search_space import Candidate, HyperparameterSchema, SearchBoundaries
from modules.trainer.base_trainer import run_trial
from utils import constants
from utils.seeding import resolve_seeds


class ContinuousEvolutionScheduler:
    """
    Asynchronous evolution with replacement-on-completion scheduling.

    Keeps ``parallelism`` evaluations in flight. Whichever evaluation finishes
    first is recorded first; each completion triggers exactly one new child
    (parented by the current best) until a stop condition fires or the
    submission cap is reached. Already-submitted work is then drained, never
    cancelled, and every late result is still recorded.
    """

    # Completions carry no generation concept; all results share one index
    GENERATION_INDEX = 0

    def __init__(self, tuning_config: Dict[str, Any], schema: HyperparameterSchema,
                 boundaries: SearchBoundaries, trainer: Any, logger: logging.Logger,
                 population: Optional[Population] = None, state: Optional[RunState] = None,
                 max_permutations: int = constants.DEFAULT_MAX_PERMUTATIONS):
        self.tuning_config = tuning_config
        self.continuous_config = tuning_config['continuous']
        self.schema = schema
        self.boundaries = boundaries
        self.trainer = trainer
        self.logger = logger
        self.max_permutations = max_permutations

        self.optimization_strategy = tuning_config['scoring_optimization_strategy']
        self.parallelism = int(self.continuous_config['parallelism'])
        self.max_iterations = int(self.continuous_config['max_iterations'])

        self.population = population if population is not None else Population()
        self.state = state if state is not None else RunState(
            self.optimization_strategy, int(self.continuous_config['rolling_improvement_count'])
        )
        self.stopping = StoppingCriteria(
            self.optimization_strategy,
            self.continuous_config.get('stopping_score'),
            logger,
            max_iterations=self.max_iterations,
        )
        self.mutator = CandidateMutator(
            schema, boundaries, float(self.continuous_config['genetic_mixing']),
            MutationPolicy.fixed(int(self.continuous_config['mutation_aggressiveness'])),
            np.random.default_rng(resolve_seeds(tuning_config)['mutation']), logger,
        )
        self.stop_reason = ""

    def execute(self) -> Population:
        """Run until a stop condition or the iteration cap, then drain in-flight work."""
        self.logger.info(
            f"Starting continuous evolution for {self.schema.family}: parallelism {self.parallelism}, "
            f"max iterations {self.max_iterations}, rolling window "
            f"{self.continuous_config['rolling_improvement_count']}"
        )
        pool = build_initial_pool(
            self.tuning_config, self.schema, self.boundaries, self.logger, self.max_permutations
        )

        with ThreadPoolExecutor(max_workers=self.parallelism,
                                thread_name_prefix="evolution-worker") as executor:
            in_flight: Dict[Future, int] = {}
            for _ in range(min(self.parallelism, self.max_iterations)):
                self._submit(executor, in_flight, self.mutator.breed(pool))

            stopping = False
            while in_flight:
                done, _ = wait(list(in_flight), return_when=FIRST_COMPLETED)
                for future in done:
                    in_flight.pop(future)
                    result = future.result()
                    self._record(result)

                    if not stopping:
                        stopping, reason = self.stopping.should_stop(self.state)
                        if stopping:
                            self.stop_reason = reason
                            self.logger.info(
                                f"{reason}; draining {len(in_flight)} in-flight evaluations"
                            )
                    if not stopping:
                        self._submit(executor, in_flight, self._next_child(pool))

        best = self.state.best
        best_text = f"best {best.score:.6g}" if best else "no successful evaluation"
        self.logger.info(
            f"Continuous evolution finished: {self.state.completed} completed, "
            f"{self.state.submitted} submitted, {best_text}"
        )
        return self.population

    def _submit(self, executor: ThreadPoolExecutor, in_flight: Dict[Future, int],
                candidate: Candidate) -> None:
        sequence_id = self.state.register_submission()
        future = executor.submit(
            run_trial, self.trainer, candidate, self.GENERATION_INDEX, sequence_id, self.logger
        )
        in_flight[future] = sequence_id

    def _record(self, result: EvaluationResult) -> None:
        size = self.population.append(result)
        improved = self.state.record_completion(result)
        if improved:
            self.logger.info(f"New best score {result.score:.6g} at trial {result.sequence_id}")
        if size % 10 == 0:
            self.logger.info(f"Processed {size} evaluations...")

    def _next_child(self, pool: List[Candidate]) -> Candidate:
        best = self.state.best
        if best is None:
            # Nothing has succeeded yet, keep breeding from the initial pool
            return self.mutator.breed(pool)
        return self.mutator.mutate(best.candidate, self.GENERATION_INDEX)
