import json

import pandas as pd
import pytest

from modules.population import EvaluationResult
from modules.reporting_engine import ReportExporter
from modules.result_aggregator import aggregate
from modules.search_space import Candidate
from utils import constants


@pytest.fixture
def config(tmp_path):
    return {'outputs': {'base_results_dir': str(tmp_path)}}


@pytest.fixture
def report():
    results = [
        EvaluationResult.success(Candidate.from_dict({'depth': 3, 'crit': 'gini'}), 0.8, 0, 0,
                                 metrics={'cv_accuracy_std': 0.01}),
        EvaluationResult.success(Candidate.from_dict({'depth': 5, 'crit': 'entropy'}), 0.9, 1, 1),
        EvaluationResult.failure(Candidate.from_dict({'depth': 7, 'crit': 'gini'}), 1, 2,
                                 error="ValueError: bad"),
    ]
    return aggregate(results, 'maximize', model_family='Trees', stop_reason="Completed all 2 generations")


def test_writes_all_artifacts(config, report, mock_logger, tmp_path):
    paths = ReportExporter(config, mock_logger).execute(report, "run_1")

    output_dir = tmp_path / constants.TUNING_RESULTS_DIR
    assert paths['results'] == output_dir / "all_results.parquet"
    results = pd.read_parquet(paths['results'])
    assert len(results) == 3
    assert results['failed'].tolist() == [False, False, True]

    stats = pd.read_parquet(output_dir / "generation_statistics.parquet")
    assert stats['generation'].tolist() == [0, 1]

    best = json.loads((output_dir / "best_configuration.json").read_text())
    assert best['run_id'] == "run_1"
    assert best['best']['score'] == 0.9
    assert best['best']['hyperparameters'] == {'depth': 5, 'crit': 'entropy'}
    assert best['failed_evaluations'] == 1
    assert best['stop_reason'] == "Completed all 2 generations"


def test_no_successful_result(config, mock_logger):
    report = aggregate([], 'minimize')
    summary = ReportExporter.summarize(report, "empty")
    assert summary['best'] is None
    assert summary['total_evaluations'] == 0
    ReportExporter(config, mock_logger).execute(report, "empty")
