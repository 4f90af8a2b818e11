import math

import pytest

from modules.search_space import Candidate
from modules.trainer import BaseTrainer, TrainerResult, run_trial


class StubTrainer(BaseTrainer):
    def __init__(self, output):
        self.output = output

    def evaluate(self, candidate):
        if isinstance(self.output, Exception):
            raise self.output
        return self.output


@pytest.fixture
def candidate():
    return Candidate.from_dict({'x': 1.0})


@pytest.mark.parametrize("output, score, metrics", [
    (0.75, 0.75, {}),
    ((0.5, {'rmse': 0.2}), 0.5, {'rmse': 0.2}),
    (TrainerResult(0.25, {'auc': 0.9}, 'model.joblib'), 0.25, {'auc': 0.9}),
])
def test_supported_outputs(candidate, mock_logger, output, score, metrics):
    r = run_trial(StubTrainer(output), candidate, generation=2, sequence_id=9, logger=mock_logger)
    assert not r.failed
    assert r.score == score
    assert dict(r.metrics) == metrics
    assert r.generation == 2 and r.sequence_id == 9
    assert r.submitted_at <= r.completed_at


def test_artifact_is_carried(candidate, mock_logger):
    r = run_trial(StubTrainer(TrainerResult(1.0, None, 'path.joblib')), candidate, 0, 0, mock_logger)
    assert r.model_artifact == 'path.joblib'


@pytest.mark.parametrize("output, error_prefix", [
    (ValueError("boom"), "ValueError: boom"),
    (float('nan'), "EvaluationError"),
    (float('inf'), "EvaluationError"),
    ("not a score", "EvaluationError"),
    ((0.5, 5), "EvaluationError: Trainer metrics must be a mapping"),
    (TrainerResult(0.5, [1, 2]), "EvaluationError: Trainer metrics must be a mapping"),
])
def test_failures_are_recorded_not_raised(candidate, mock_logger, output, error_prefix):
    r = run_trial(StubTrainer(output), candidate, 0, 3, mock_logger)
    assert r.failed
    assert math.isnan(r.score)
    assert r.error.startswith(error_prefix)
    mock_logger.error.assert_called_once()


def test_base_trainer_is_abstract():
    with pytest.raises(TypeError):
        BaseTrainer()
