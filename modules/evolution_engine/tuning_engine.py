import logging
from typing import Any, Dict, Optional

from modules.config_manager import ConfigurationManager
from modules.evolution_engine.batch_scheduler import BatchEvolutionScheduler
from modules.evolution_engine.continuous_scheduler import ContinuousEvolutionScheduler
from modules.population import Population
from modules.result_aggregator import TuningReport, aggregate
from modules.search_space import resolve_search_space
from utils import constants
from utils.error_handling import handle_engine_errors


class TuningEngine:
    """
    Entry point of the evolutionary tuning engine for one model family.

    Validates the configuration up front (configuration errors surface from the
    constructor, before any evaluation), selects the batch or continuous
    scheduler and turns the resulting population into a TuningReport.
    """

    def __init__(self, config: Dict[str, Any], logger: logging.Logger, trainer: Any):
        self.config = ConfigurationManager().validate_dict(config)
        self.logger = logger
        self.trainer = trainer
        self.tuning_config = self.config['tuning']
        self.schema, self.boundaries = resolve_search_space(self.tuning_config)
        self.max_permutations = self.config.get('resources', {}).get(
            'max_permutations', constants.DEFAULT_MAX_PERMUTATIONS
        )
        self.population = Population()
        self.scheduler = self._build_scheduler()

    def _build_scheduler(self):
        strategy = self.tuning_config['evolution_strategy']
        scheduler_cls = (
            BatchEvolutionScheduler if strategy == constants.BATCH else ContinuousEvolutionScheduler
        )
        return scheduler_cls(
            self.tuning_config, self.schema, self.boundaries, self.trainer, self.logger,
            population=self.population, max_permutations=self.max_permutations,
        )

    @handle_engine_errors("Evolutionary tuning")
    def execute(self) -> TuningReport:
        """
        Run the configured evolution strategy to completion.

        Returns:
            TuningReport with the flat results, per-generation/window statistics and best result.

        Raises:
            EvolutionError: batch run left without eligible parents (population attached).
        """
        self.logger.info(
            f"Tuning {self.schema.family} ({len(self.schema)} dimensions) with "
            f"{self.tuning_config['evolution_strategy']} evolution, "
            f"{self.tuning_config['scoring_optimization_strategy']} score"
        )
        self.scheduler.execute()
        report = self.progress(stop_reason=self.scheduler.stop_reason)

        if report.best is not None:
            self.logger.info(
                f"Best configuration for {self.schema.family}: score {report.best.score:.6g} "
                f"{report.best.candidate.as_dict()}"
            )
        else:
            self.logger.warning(f"No successful evaluation for {self.schema.family}")
        return report

    def progress(self, stop_reason: str = "") -> TuningReport:
        """Aggregate whatever has been recorded so far; callable while a run is in progress."""
        return aggregate(
            self.population.snapshot(),
            self.tuning_config['scoring_optimization_strategy'],
            window_size=self._report_window_size(),
            model_family=self.schema.family,
            stop_reason=stop_reason,
        )

    def _report_window_size(self) -> Optional[int]:
        if self.tuning_config['evolution_strategy'] == constants.BATCH:
            return None
        continuous = self.tuning_config['continuous']
        return int(continuous.get('report_window_size') or continuous['parallelism'])
