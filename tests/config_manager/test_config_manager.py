import json
from pathlib import Path

import pytest

from modules.config_manager.config_manager import ConfigurationManager
from utils.exceptions import ConfigurationError

PROJECT_SCHEMA = Path(__file__).resolve().parents[2] / "config" / "schema.json"


@pytest.fixture
def config_manager(tmp_path):
    """Provides a ConfigurationManager instance with dummy config and schema paths."""
    return ConfigurationManager(str(tmp_path / "config.json"), str(tmp_path / "schema.json"))


@pytest.fixture
def mock_files(tmp_path, make_config):
    """Writes a valid config next to the project schema."""
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(make_config()))
    return config_path, PROJECT_SCHEMA


class TestLoading:
    def test_load_and_validate_success(self, mock_files):
        config_path, schema_path = mock_files
        config = ConfigurationManager(str(config_path), str(schema_path)).load_and_validate()
        assert config['tuning']['batch']['parallelism'] == 4
        assert config['tuning']['_internal_seeds'] == {'sampling': 7, 'mutation': 1007, 'trainer': 2007}

    def test_missing_file(self, config_manager):
        with pytest.raises(ConfigurationError, match="File not found"):
            config_manager.load_and_validate()

    def test_invalid_json(self, config_manager, tmp_path):
        (tmp_path / "config.json").write_text("{not json")
        (tmp_path / "schema.json").write_text("{}")
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            config_manager.load_and_validate()

    def test_schema_violation(self, tmp_path, make_config):
        config = make_config(evolution_strategy='sideways')
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(config))
        with pytest.raises(ConfigurationError, match="Schema validation failed"):
            ConfigurationManager(str(config_path), str(PROJECT_SCHEMA)).load_and_validate()

    def test_shipped_config_is_valid(self):
        project_config = PROJECT_SCHEMA.parent / "config.json"
        config = ConfigurationManager(str(project_config), str(PROJECT_SCHEMA)).load_and_validate()
        assert config['tuning']['model_family'] == 'RandomForest'


class TestValidateDict:
    def test_defaults_are_hydrated_on_a_copy(self, make_config):
        config = make_config()
        validated = ConfigurationManager().validate_dict(config)
        assert validated['tuning']['continuous']['rolling_improvement_count'] == 20
        assert validated['resources']['max_permutations'] == 1_000_000
        assert 'batch' not in config['tuning']

    def test_partial_sections_keep_user_values(self, make_config):
        validated = ConfigurationManager().validate_dict(make_config(batch={'parallelism': 8}))
        assert validated['tuning']['batch']['parallelism'] == 8
        assert validated['tuning']['batch']['genetic_mixing'] == 0.7

    @pytest.mark.parametrize("overrides, field", [
        ({'scoring_optimization_strategy': 'best'}, "scoring_optimization_strategy"),
        ({'evolution_strategy': 'steady'}, "evolution_strategy"),
        ({'first_gen_mode': 'grid'}, "first_gen_mode"),
        ({'model_type': 'ranker'}, "model_type"),
        ({'seed': -1}, "seed"),
        ({'first_gen_permutations': 1}, "first_gen_permutations"),
        ({'first_generation_gene_pool': 0}, "first_generation_gene_pool"),
        ({'batch': {'genetic_mixing': 1.2}}, "batch.genetic_mixing"),
        ({'batch': {'number_of_parents_to_retain': 0}}, "number_of_parents_to_retain"),
        ({'batch': {'generational_mutation_strategy': 'cubic'}}, "generational_mutation_strategy"),
        ({'batch': {'mutation_magnitude_mode': 'huge'}}, "mutation_magnitude_mode"),
        ({'batch': {'parallelism': 0}}, "batch.parallelism"),
        ({'batch': {'auto_stopping_flag': True}}, "auto_stopping_score"),
        ({'continuous': {'genetic_mixing': -0.1}}, "continuous.genetic_mixing"),
        ({'continuous': {'max_iterations': 0}}, "max_iterations"),
        ({'continuous': {'rolling_improvement_count': 0}}, "rolling_improvement_count"),
        ({'continuous': {'stopping_score': 'high'}}, "stopping_score"),
        ({'continuous': {'report_window_size': 0}}, "report_window_size"),
    ])
    def test_invalid_fields_are_named(self, make_config, overrides, field):
        with pytest.raises(ConfigurationError, match=field):
            ConfigurationManager().validate_dict(make_config(**overrides))

    def test_missing_tuning_section(self):
        with pytest.raises(ConfigurationError, match="'tuning'"):
            ConfigurationManager().validate_dict({'data': {}})

    def test_unknown_family(self, make_config):
        config = make_config(model_family='NeuralNet')
        with pytest.raises(ConfigurationError, match="Unknown model_family"):
            ConfigurationManager().validate_dict(config)

    def test_bad_boundary_names_dimension(self, make_config):
        config = make_config(numeric_boundaries={'x': [5.0, 1.0], 'n': [1, 5]})
        with pytest.raises(ConfigurationError, match="'x'"):
            ConfigurationManager().validate_dict(config)

    def test_family_defaults(self):
        validated = ConfigurationManager().validate_dict({'tuning': {'model_family': 'GBT'}})
        assert validated['tuning']['model_type'] == 'regressor'

    def test_materialization_guard(self, make_config):
        config = make_config()
        config['resources'] = {'max_permutations': 10, 'materialize_permutations': True}
        with pytest.raises(ConfigurationError, match="explosion"):
            ConfigurationManager().validate_dict(config)

    def test_large_space_is_allowed_when_sampling(self, make_config):
        config = make_config()
        config['resources'] = {'max_permutations': 10}
        ConfigurationManager().validate_dict(config)

    def test_space_beyond_int64_is_validated(self):
        names = [f"x{i}" for i in range(12)]
        config = {'tuning': {
            'model_family': 'Custom',
            'schema': [{'name': n, 'kind': 'numeric-continuous'} for n in names],
            'numeric_boundaries': {n: [0.0, 1.0] for n in names},
            'first_gen_permutations': 50,
        }}
        validated = ConfigurationManager().validate_dict(config)
        assert validated['tuning']['first_gen_permutations'] == 50

    def test_scalar_boundary_is_a_configuration_error(self, make_config):
        config = make_config(numeric_boundaries={'x': 5})
        with pytest.raises(ConfigurationError, match=r"numeric_boundaries\['x'\]"):
            ConfigurationManager().validate_dict(config)


class TestArtifacts:
    def test_generate_run_id_is_stable(self):
        manager = ConfigurationManager()
        assert manager.generate_run_id() == manager.generate_run_id()

    def test_save_artifacts(self, make_config, tmp_path):
        manager = ConfigurationManager()
        manager.validate_dict(make_config())
        manager.generate_run_id()
        manager.save_artifacts(str(tmp_path))

        config_dir = tmp_path / "01_RunConfiguration"
        saved = json.loads((config_dir / "config_used.json").read_text())
        assert saved['tuning']['seed'] == 7
        assert len((config_dir / "config_hash.txt").read_text()) == 64
        metadata = json.loads((config_dir / "run_metadata.json").read_text())
        assert metadata['run_id'] == manager.run_id
