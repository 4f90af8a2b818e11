import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from modules.base.base_engine import BaseEngine
from modules.result_aggregator import TuningReport
from utils import constants
from utils.error_handling import handle_engine_errors
from utils.file_io import save_dataframe
from utils.json_utils import NumpyEncoder, to_native


class ReportExporter(BaseEngine):
    """
    Persists a TuningReport under '<base_results_dir>/02_TuningResults'.

    Artifacts:
    - all_results.parquet: one row per evaluated candidate.
    - generation_statistics.parquet: mean/std/best per generation or window.
    - best_configuration.json: winning hyperparameters plus run summary.
    """

    def __init__(self, config: dict, logger: logging.Logger):
        super().__init__(config, logger)
        self.excel_copy = config.get('outputs', {}).get('save_excel_copy', False)

    def _get_engine_directory_name(self) -> str:
        return constants.TUNING_RESULTS_DIR

    @handle_engine_errors("Report export")
    def execute(self, report: TuningReport, run_id: str) -> Dict[str, Path]:
        """
        Write every report artifact.

        Returns:
            dict: artifact name -> written path.
        """
        self.logger.info(f"Exporting tuning report ({len(report.results)} results) to {self.output_dir}")
        paths = {
            'results': save_dataframe(
                report.results_frame(), self.output_dir / "all_results.parquet",
                excel_copy=self.excel_copy,
            ),
            'statistics': save_dataframe(
                report.statistics_frame(), self.output_dir / "generation_statistics.parquet",
                excel_copy=self.excel_copy,
            ),
        }

        best_path = self.output_dir / "best_configuration.json"
        with open(best_path, 'w') as f:
            json.dump(self.summarize(report, run_id), f, indent=2, cls=NumpyEncoder)
        paths['best'] = best_path

        self.logger.info(f"Report export complete: {[p.name for p in paths.values()]}")
        return paths

    @staticmethod
    def summarize(report: TuningReport, run_id: str) -> Dict[str, Any]:
        """JSON-ready run summary with the best configuration (None when nothing succeeded)."""
        failed = sum(1 for r in report.results if not r.eligible)
        summary = {
            'run_id': run_id,
            'exported_at': datetime.now().isoformat(),
            'model_family': report.model_family,
            'optimization_strategy': report.optimization_strategy,
            'grouping': report.grouping,
            'stop_reason': report.stop_reason,
            'total_evaluations': len(report.results),
            'failed_evaluations': failed,
            'best': None,
        }
        if report.best is not None:
            summary['best'] = {
                'score': report.best.score,
                'generation': report.best.generation,
                'sequence_id': report.best.sequence_id,
                'hyperparameters': {k: to_native(v) for k, v in report.best.candidate.values},
                'metrics': {k: to_native(v) for k, v in report.best.metrics.items()},
            }
        return summary
