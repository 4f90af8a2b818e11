import copy
import logging
from unittest.mock import MagicMock

import pytest

from modules.config_manager import ConfigurationManager
from modules.search_space import resolve_search_space

CUSTOM_TUNING = {
    'model_family': 'Custom',
    'schema': [
        {'name': 'x', 'kind': 'numeric-continuous'},
        {'name': 'n', 'kind': 'numeric-integer'},
        {'name': 'mode', 'kind': 'categorical'},
        {'name': 'flag', 'kind': 'boolean'},
    ],
    'numeric_boundaries': {'x': [0.0, 10.0], 'n': [1, 5]},
    'string_boundaries': {'mode': ['a', 'b', 'c']},
    'seed': 7,
    'first_gen_permutations': 3,
    'first_generation_gene_pool': 10,
}


def _merge(base, overrides):
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@pytest.fixture
def mock_logger():
    """Provides a mock logger instance."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def make_config(tmp_path):
    """Builds a full config dict around the 4-dimension custom search space."""
    def _make(**tuning_overrides):
        return {
            'tuning': _merge(CUSTOM_TUNING, tuning_overrides),
            'outputs': {'base_results_dir': str(tmp_path / "results")},
        }
    return _make


@pytest.fixture
def make_tuning(make_config):
    """Hydrated tuning section plus its resolved schema and boundaries."""
    def _make(**tuning_overrides):
        config = ConfigurationManager().validate_dict(make_config(**tuning_overrides))
        tuning = config['tuning']
        schema, boundaries = resolve_search_space(tuning)
        return tuning, schema, boundaries
    return _make


class ScoreTrainer:
    """Deterministic stub trainer: score = x + n (+1 when flag is set)."""

    def evaluate(self, candidate):
        return candidate['x'] + candidate['n'] + (1.0 if candidate['flag'] else 0.0)


class ConstantTrainer:
    def __init__(self, score=1.0):
        self.score = score

    def evaluate(self, candidate):
        return self.score


class FailingTrainer:
    def evaluate(self, candidate):
        raise ValueError("boom")


@pytest.fixture
def score_trainer():
    return ScoreTrainer()


@pytest.fixture
def constant_trainer():
    return ConstantTrainer()


@pytest.fixture
def failing_trainer():
    return FailingTrainer()


@pytest.fixture
def restore_root_logger():
    """Removes handlers added by LoggingConfigurator.setup() and restores the root level."""
    root = logging.getLogger()
    original, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in original:
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)
