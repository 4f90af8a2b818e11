# utils/constants.py

# --- Top-Level Result Directories ---
# Sequentially numbered for proper sorting

CONFIG_DIR = "01_RunConfiguration"          # Run config, metadata, seeds
TUNING_RESULTS_DIR = "02_TuningResults"     # Flat results, generation statistics, best config

TOP_LEVEL_RESULT_DIRS = [
    CONFIG_DIR,
    TUNING_RESULTS_DIR,
]

LOG_FILE_NAME = "tuning.log"

# --- Dimension kinds ---
NUMERIC_CONTINUOUS = "numeric-continuous"
NUMERIC_INTEGER = "numeric-integer"
CATEGORICAL = "categorical"
BOOLEAN = "boolean"

DIMENSION_KINDS = (NUMERIC_CONTINUOUS, NUMERIC_INTEGER, CATEGORICAL, BOOLEAN)
NUMERIC_KINDS = (NUMERIC_CONTINUOUS, NUMERIC_INTEGER)

# --- Numeric scales ---
LINEAR_SCALE = "linear"
LOG_SCALE = "log"
SCALES = (LINEAR_SCALE, LOG_SCALE)

# --- Strategy names ---
MAXIMIZE = "maximize"
MINIMIZE = "minimize"
OPTIMIZATION_STRATEGIES = (MAXIMIZE, MINIMIZE)

BATCH = "batch"
CONTINUOUS = "continuous"
EVOLUTION_STRATEGIES = (BATCH, CONTINUOUS)

MUTATION_LINEAR = "linear"
MUTATION_FIXED = "fixed"
GENERATIONAL_MUTATION_STRATEGIES = (MUTATION_LINEAR, MUTATION_FIXED)

MAGNITUDE_RANDOM = "random"
MAGNITUDE_FIXED = "fixed"
MUTATION_MAGNITUDE_MODES = (MAGNITUDE_RANDOM, MAGNITUDE_FIXED)

FIRST_GEN_RANDOM = "random"
FIRST_GEN_PERMUTATIONS = "permutations"
FIRST_GEN_MODES = (FIRST_GEN_RANDOM, FIRST_GEN_PERMUTATIONS)

MODEL_TYPES = ("regressor", "classifier")

CUSTOM_FAMILY = "Custom"

# --- Resource limits ---
DEFAULT_MAX_PERMUTATIONS = 1_000_000  # Materialized Cartesian products above this are refused

# --- Defaults hydrated into the 'tuning' section by the ConfigurationManager ---
DEFAULT_TUNING_CONFIG = {
    'model_type': 'regressor',
    'seed': 42,
    'scoring_optimization_strategy': MAXIMIZE,
    'evolution_strategy': BATCH,
    'first_gen_mode': FIRST_GEN_PERMUTATIONS,
    'first_gen_permutations': 10,
    'first_generation_gene_pool': 20,
    'batch': {
        'parallelism': 4,
        'number_of_generations': 10,
        'number_of_mutations_per_generation': 10,
        'number_of_parents_to_retain': 3,
        'genetic_mixing': 0.7,
        'generational_mutation_strategy': MUTATION_LINEAR,
        'mutation_magnitude_mode': MAGNITUDE_FIXED,
        'fixed_mutation_value': 1,
        'mutation_decrement': 1,
        'auto_stopping_flag': False,
        'auto_stopping_score': None,
    },
    'continuous': {
        'parallelism': 4,
        'max_iterations': 200,
        'stopping_score': None,
        'mutation_aggressiveness': 3,
        'genetic_mixing': 0.7,
        'rolling_improvement_count': 20,
        'report_window_size': None,
    },
}
