import copy
import json
import os
import hashlib
import sys
import logging
from datetime import datetime
from numbers import Real
from pathlib import Path
from typing import Dict, Any, Optional

import jsonschema

from modules.permutation_generator import PermutationGenerator
from modules.search_space import resolve_search_space
from utils.exceptions import ConfigurationError
from utils.json_utils import NumpyEncoder
from utils.seeding import derive_seeds
from utils import constants


def _deep_merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay ``overrides`` on a copy of ``defaults``."""
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


class ConfigurationManager:
    """
    Manages tuning configuration loading, validation, and access.
    Acts as the single source of truth and safety guard for a tuning run.

    Every rule violation surfaces as a ConfigurationError naming the
    offending field, before any candidate is evaluated.
    """

    def __init__(self, config_path: str = "config/config.json",
                 schema_path: str = "config/schema.json"):
        """
        Initialize the ConfigurationManager.

        Args:
            config_path (str): Path to the user configuration JSON.
            schema_path (str): Path to the JSON schema definition.
        """
        self.config_path = config_path
        self.schema_path = schema_path
        self.config: Dict[str, Any] = {}
        self.schema: Dict[str, Any] = {}
        self.run_id: Optional[str] = None
        self.logger = logging.getLogger("config_manager")

    def load_and_validate(self) -> Dict[str, Any]:
        """
        Main entry point. Loads config, validates schema/logic/resources,
        applies defaults, and propagates seeds.

        Returns:
            Dict[str, Any]: The fully validated and hydrated configuration.

        Raises:
            ConfigurationError: If any validation step fails.
        """
        # 1. Load Files
        self.config = self._load_json(self.config_path)
        self.schema = self._load_json(self.schema_path)

        # 2. Structural Validation (Schema)
        self._validate_schema()

        # 3-6. Logic, resources, defaults, seeds
        return self.validate_dict(self.config)

    def validate_dict(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate an in-memory configuration without touching the filesystem.

        Returns a hydrated deep copy; the caller's dict is left untouched.
        """
        if not isinstance(config, dict) or not isinstance(config.get('tuning'), dict):
            raise ConfigurationError("Configuration must contain a 'tuning' section.")

        self.config = copy.deepcopy(config)
        self.config['tuning'] = _deep_merge(constants.DEFAULT_TUNING_CONFIG, self.config['tuning'])

        self._validate_logic()
        self._validate_resources()
        self._propagate_seeds()
        return self.config

    def generate_run_id(self) -> str:
        """
        Generate or retrieve a unique run identifier based on timestamp.
        Used for directory naming and metadata.
        """
        if not self.run_id:
            # Format: YYYYMMDD_HHMMSS
            self.run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.run_id

    def save_artifacts(self, output_dir: str) -> None:
        """
        Save configuration artifacts to the run directory for full reproducibility.

        Saves:
        1. config_used.json: The exact (hydrated) config object in memory.
        2. config_hash.txt: SHA256 hash for versioning.
        3. run_metadata.json: Environment details (Python version, Platform, etc.).
        """
        config_dir = Path(output_dir) / constants.CONFIG_DIR
        config_dir.mkdir(parents=True, exist_ok=True)

        with open(config_dir / "config_used.json", 'w') as f:
            json.dump(self.config, f, indent=2, cls=NumpyEncoder)

        config_str = json.dumps(self.config, sort_keys=True, cls=NumpyEncoder)
        config_hash = hashlib.sha256(config_str.encode()).hexdigest()

        with open(config_dir / "config_hash.txt", 'w') as f:
            f.write(config_hash)

        metadata = {
            'run_id': self.run_id,
            'start_time': datetime.now().isoformat(),
            'python_version': sys.version,
            'platform': sys.platform,
            'config_hash': config_hash,
            'working_directory': os.getcwd()
        }

        with open(config_dir / "run_metadata.json", 'w') as f:
            json.dump(metadata, f, indent=2)

    def _load_json(self, path: str) -> Dict[str, Any]:
        """Safely load a JSON file."""
        if not os.path.exists(path):
            raise ConfigurationError(f"File not found: {path}")
        try:
            with open(path, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {str(e)}")

    def _validate_schema(self) -> None:
        """Validate config structure against JSON schema."""
        try:
            jsonschema.validate(instance=self.config, schema=self.schema)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(f"Schema validation failed: {e.message}")

    def _validate_logic(self) -> None:
        """Comprehensive logical validation of the tuning section."""
        tuning = self.config['tuning']

        # --- Top-level tuning settings ---
        if not tuning.get('model_family'):
            raise ConfigurationError("tuning.model_family must be specified.")
        self._check_choice('tuning.model_type', tuning['model_type'], constants.MODEL_TYPES)
        self._check_choice('tuning.scoring_optimization_strategy',
                           tuning['scoring_optimization_strategy'], constants.OPTIMIZATION_STRATEGIES)
        self._check_choice('tuning.evolution_strategy',
                           tuning['evolution_strategy'], constants.EVOLUTION_STRATEGIES)
        self._check_choice('tuning.first_gen_mode', tuning['first_gen_mode'], constants.FIRST_GEN_MODES)

        seed = tuning['seed']
        if not isinstance(seed, int) or isinstance(seed, bool) or seed < 0:
            raise ConfigurationError(f"tuning.seed must be a non-negative integer, got {seed!r}.")
        self._check_int('tuning.first_generation_gene_pool', tuning['first_generation_gene_pool'], 1)
        self._check_int('tuning.first_gen_permutations', tuning['first_gen_permutations'], 2)

        # --- Batch Section ---
        batch = tuning['batch']
        self._check_int('tuning.batch.parallelism', batch['parallelism'], 1)
        self._check_int('tuning.batch.number_of_generations', batch['number_of_generations'], 1)
        self._check_int('tuning.batch.number_of_mutations_per_generation',
                        batch['number_of_mutations_per_generation'], 1)
        self._check_int('tuning.batch.number_of_parents_to_retain', batch['number_of_parents_to_retain'], 1)
        self._check_ratio('tuning.batch.genetic_mixing', batch['genetic_mixing'])
        self._check_choice('tuning.batch.generational_mutation_strategy',
                           batch['generational_mutation_strategy'], constants.GENERATIONAL_MUTATION_STRATEGIES)
        self._check_choice('tuning.batch.mutation_magnitude_mode',
                           batch['mutation_magnitude_mode'], constants.MUTATION_MAGNITUDE_MODES)
        self._check_int('tuning.batch.fixed_mutation_value', batch['fixed_mutation_value'], 1)
        self._check_int('tuning.batch.mutation_decrement', batch['mutation_decrement'], 0)
        if batch['auto_stopping_flag'] and not _is_number(batch.get('auto_stopping_score')):
            raise ConfigurationError(
                "tuning.batch.auto_stopping_score must be a number when auto_stopping_flag is enabled."
            )

        # --- Continuous Section ---
        continuous = tuning['continuous']
        self._check_int('tuning.continuous.parallelism', continuous['parallelism'], 1)
        self._check_int('tuning.continuous.max_iterations', continuous['max_iterations'], 1)
        self._check_int('tuning.continuous.mutation_aggressiveness', continuous['mutation_aggressiveness'], 1)
        self._check_int('tuning.continuous.rolling_improvement_count',
                        continuous['rolling_improvement_count'], 1)
        self._check_ratio('tuning.continuous.genetic_mixing', continuous['genetic_mixing'])
        stopping_score = continuous.get('stopping_score')
        if stopping_score is not None and not _is_number(stopping_score):
            raise ConfigurationError(f"tuning.continuous.stopping_score must be a number, got {stopping_score!r}.")
        if continuous.get('report_window_size') is not None:
            self._check_int('tuning.continuous.report_window_size', continuous['report_window_size'], 1)

        # --- Search space (family, schema, boundaries) ---
        resolve_search_space(tuning)

    def _validate_resources(self) -> None:
        """
        Guard against combinatorial explosion of the permutation space.

        Seeding only decodes sampled indices, so large spaces are merely logged
        unless 'resources.materialize_permutations' asks for the full product.
        """
        tuning = self.config['tuning']
        resources = self.config.setdefault('resources', {})
        max_permutations = resources.setdefault('max_permutations', constants.DEFAULT_MAX_PERMUTATIONS)
        self._check_int('resources.max_permutations', max_permutations, 1)

        if tuning['first_gen_mode'] != constants.FIRST_GEN_PERMUTATIONS:
            return

        schema, boundaries = resolve_search_space(tuning)
        generator = PermutationGenerator(
            schema, boundaries, int(tuning['first_gen_permutations']),
            max_permutations=max_permutations, logger=self.logger,
        )
        total = generator.space_size()

        if resources.get('materialize_permutations', False) and total > max_permutations:
            raise ConfigurationError(
                f"Permutation space explosion detected! Total permutations ({total}) exceeds "
                f"safety limit ({max_permutations}). Reduce tuning.first_gen_permutations or "
                f"increase 'resources.max_permutations'."
            )
        self.logger.info(f"Permutation space validated: {total} combinations (Limit: {max_permutations})")

    def _propagate_seeds(self) -> None:
        """
        Propagate master seed to internal components to ensure full run reproducibility.
        Uses large, non-overlapping offsets to avoid correlation between components.
        """
        master_seed = self.config['tuning']['seed']
        self.config['tuning']['_internal_seeds'] = derive_seeds(master_seed)
        self.logger.debug(
            f"Seeds propagated from master ({master_seed}): {self.config['tuning']['_internal_seeds']}"
        )

    @staticmethod
    def _check_choice(field: str, value: Any, allowed) -> None:
        if value not in allowed:
            raise ConfigurationError(f"{field} must be one of {list(allowed)}, got {value!r}.")

    @staticmethod
    def _check_int(field: str, value: Any, minimum: int) -> None:
        if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
            raise ConfigurationError(f"{field} must be an integer >= {minimum}, got {value!r}.")

    @staticmethod
    def _check_ratio(field: str, value: Any) -> None:
        if not _is_number(value) or not (0.0 <= value <= 1.0):
            raise ConfigurationError(f"{field} must be in [0, 1], got {value!r}.")
