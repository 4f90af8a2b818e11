import json
from pathlib import Path

import pandas as pd
import pytest
from sklearn.datasets import make_regression

import main
from utils.exceptions import DataValidationError

PROJECT_SCHEMA = Path(__file__).resolve().parents[1] / "config" / "schema.json"


@pytest.fixture
def run_config(tmp_path):
    X, y = make_regression(n_samples=80, n_features=4, noise=0.5, random_state=1)
    df = pd.DataFrame(X, columns=["a", "b", "c", "d"])
    df["label"] = y
    data_path = tmp_path / "train.csv"
    df.to_csv(data_path, index=False)

    config = {
        'tuning': {
            'model_family': 'Trees',
            'seed': 3,
            'first_gen_permutations': 2,
            'first_generation_gene_pool': 4,
            'numeric_boundaries': {
                'maxBins': [16, 32],
                'maxDepth': [2, 6],
                'minInfoGain': [0.0001, 0.01],
                'minInstancesPerNode': [1, 5],
            },
            'string_boundaries': {'impurity': ['variance']},
            'batch': {
                'parallelism': 2,
                'number_of_generations': 2,
                'number_of_mutations_per_generation': 3,
                'number_of_parents_to_retain': 2,
            },
        },
        'data': {'file_path': str(data_path), 'label_column': 'label'},
        'trainer': {'cv_folds': 3},
        'logging': {'level': 'INFO', 'log_dir': str(tmp_path / "logs"), 'colorful_console': False},
        'outputs': {'base_results_dir': str(tmp_path / "results")},
    }
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(config))
    return config_path


def test_full_run(run_config, tmp_path, restore_root_logger):
    exit_code = main.main(['--config', str(run_config), '--schema', str(PROJECT_SCHEMA), '--run-id', 'run_a'])
    assert exit_code == 0

    run_dir = tmp_path / "results" / "run_a"
    assert (run_dir / "01_RunConfiguration" / "config_used.json").exists()
    results = pd.read_parquet(run_dir / "02_TuningResults" / "all_results.parquet")
    assert len(results) == 4 + 3
    best = json.loads((run_dir / "02_TuningResults" / "best_configuration.json").read_text())
    assert best['model_family'] == 'Trees'
    assert best['best']['score'] < 0


def test_dry_run(run_config, tmp_path, restore_root_logger):
    exit_code = main.main(['--config', str(run_config), '--schema', str(PROJECT_SCHEMA),
                           '--run-id', 'dry', '--dry-run'])
    assert exit_code == 0
    assert not (tmp_path / "results" / "dry" / "02_TuningResults").exists()


def test_configuration_error_exit_code(tmp_path, restore_root_logger):
    assert main.main(['--config', str(tmp_path / "missing.json"), '--schema', str(PROJECT_SCHEMA)]) == 1


def test_missing_label_column(tmp_path, mock_logger):
    data_path = tmp_path / "data.csv"
    pd.DataFrame({'a': [1, 2], 'b': [3, 4]}).to_csv(data_path, index=False)
    config = {'data': {'file_path': str(data_path), 'label_column': 'label'}}
    with pytest.raises(DataValidationError, match="Label column"):
        main.load_training_data(config, mock_logger)
