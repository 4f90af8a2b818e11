from dataclasses import dataclass
from typing import Dict, List, Tuple, Any, Optional

from utils import constants
from utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class Dimension:
    """A single named hyperparameter axis of a model family."""
    name: str
    kind: str
    scale: str = constants.LINEAR_SCALE

    @property
    def is_numeric(self) -> bool:
        return self.kind in constants.NUMERIC_KINDS


@dataclass(frozen=True)
class HyperparameterSchema:
    """Ordered, immutable list of dimensions for one model family."""
    family: str
    dimensions: Tuple[Dimension, ...]

    @property
    def names(self) -> List[str]:
        return [d.name for d in self.dimensions]

    def __len__(self) -> int:
        return len(self.dimensions)

    def __iter__(self):
        return iter(self.dimensions)

    def dimension(self, name: str) -> Dimension:
        for dim in self.dimensions:
            if dim.name == name:
                return dim
        raise KeyError(name)


def _cont(name, scale=constants.LINEAR_SCALE):
    return Dimension(name, constants.NUMERIC_CONTINUOUS, scale)


def _int(name):
    return Dimension(name, constants.NUMERIC_INTEGER)


def _cat(name):
    return Dimension(name, constants.CATEGORICAL)


def _bool(name):
    return Dimension(name, constants.BOOLEAN)


# Static per-family schema table. Dimension order drives permutation ordering.
FAMILY_SCHEMAS: Dict[str, HyperparameterSchema] = {
    'RandomForest': HyperparameterSchema('RandomForest', (
        _int('numTrees'),
        _cat('impurity'),
        _int('maxBins'),
        _int('maxDepth'),
        _cont('minInfoGain', constants.LOG_SCALE),
        _cont('subSamplingRate'),
        _cat('featureSubsetStrategy'),
    )),
    'Trees': HyperparameterSchema('Trees', (
        _cat('impurity'),
        _int('maxBins'),
        _int('maxDepth'),
        _cont('minInfoGain', constants.LOG_SCALE),
        _int('minInstancesPerNode'),
    )),
    'GBT': HyperparameterSchema('GBT', (
        _cat('impurity'),
        _cat('lossType'),
        _int('maxBins'),
        _int('maxDepth'),
        _int('maxIter'),
        _cont('minInfoGain', constants.LOG_SCALE),
        _int('minInstancesPerNode'),
        _cont('stepSize'),
    )),
    'LinearRegression': HyperparameterSchema('LinearRegression', (
        _cont('elasticNetParams'),
        _bool('fitIntercept'),
        _cat('loss'),
        _int('maxIter'),
        _cont('regParam'),
        _bool('standardization'),
        _cont('tolerance', constants.LOG_SCALE),
    )),
    'LogisticRegression': HyperparameterSchema('LogisticRegression', (
        _cont('elasticNetParams'),
        _bool('fitIntercept'),
        _int('maxIter'),
        _cont('regParam'),
        _bool('standardization'),
        _cont('tolerance', constants.LOG_SCALE),
    )),
    'SVM': HyperparameterSchema('SVM', (
        _bool('fitIntercept'),
        _int('maxIter'),
        _cont('regParam'),
        _bool('standardization'),
        _cont('tol', constants.LOG_SCALE),
    )),
    'XGBoost': HyperparameterSchema('XGBoost', (
        _cont('alpha'),
        _cont('eta'),
        _cont('gamma'),
        _cont('lambda'),
        _int('maxDepth'),
        _cont('subSample'),
        _cont('minChildWeight'),
        _int('numRound'),
        _int('maxBins'),
        _cont('trainTestRatio'),
    )),
}

DEFAULT_NUMERIC_BOUNDARIES: Dict[str, Dict[str, Tuple[float, float]]] = {
    'RandomForest': {
        'numTrees': (50.0, 1000.0),
        'maxBins': (10.0, 100.0),
        'maxDepth': (2.0, 20.0),
        'minInfoGain': (1e-4, 0.075),
        'subSamplingRate': (0.5, 1.0),
    },
    'Trees': {
        'maxBins': (10.0, 50.0),
        'maxDepth': (2.0, 20.0),
        'minInfoGain': (1e-4, 0.075),
        'minInstancesPerNode': (1.0, 50.0),
    },
    'GBT': {
        'maxBins': (10.0, 100.0),
        'maxDepth': (2.0, 20.0),
        'maxIter': (10.0, 100.0),
        'minInfoGain': (1e-4, 0.075),
        'minInstancesPerNode': (1.0, 50.0),
        'stepSize': (1e-4, 1.0),
    },
    'LinearRegression': {
        'elasticNetParams': (0.0, 1.0),
        'maxIter': (100.0, 10000.0),
        'regParam': (0.0, 1.0),
        'tolerance': (1e-9, 1e-5),
    },
    'LogisticRegression': {
        'elasticNetParams': (0.0, 1.0),
        'maxIter': (100.0, 10000.0),
        'regParam': (0.0, 1.0),
        'tolerance': (1e-9, 1e-5),
    },
    'SVM': {
        'maxIter': (100.0, 10000.0),
        'regParam': (0.0, 1.0),
        'tol': (1e-9, 1e-5),
    },
    'XGBoost': {
        'alpha': (0.0, 1.0),
        'eta': (0.1, 0.5),
        'gamma': (0.0, 10.0),
        'lambda': (0.1, 10.0),
        'maxDepth': (3.0, 10.0),
        'subSample': (0.4, 0.6),
        'minChildWeight': (0.1, 10.0),
        'numRound': (5.0, 25.0),
        'maxBins': (25.0, 512.0),
        'trainTestRatio': (0.2, 0.8),
    },
}

# Categorical defaults differ between regression and classification families
DEFAULT_STRING_BOUNDARIES: Dict[str, Dict[str, Dict[str, List[Any]]]] = {
    'regressor': {
        'RandomForest': {
            'impurity': ['variance'],
            'featureSubsetStrategy': ['auto', 'all', 'sqrt', 'log2', 'onethird'],
        },
        'Trees': {'impurity': ['variance']},
        'GBT': {'impurity': ['variance'], 'lossType': ['squared', 'absolute']},
        'LinearRegression': {'loss': ['squaredError', 'huber']},
    },
    'classifier': {
        'RandomForest': {
            'impurity': ['gini', 'entropy'],
            'featureSubsetStrategy': ['auto', 'all', 'sqrt', 'log2', 'onethird'],
        },
        'Trees': {'impurity': ['gini', 'entropy']},
        'GBT': {'impurity': ['gini', 'entropy'], 'lossType': ['logistic']},
    },
}


def get_schema(family: str) -> HyperparameterSchema:
    """Look up the static schema for a model family."""
    if family not in FAMILY_SCHEMAS:
        raise ConfigurationError(
            f"Unknown model_family '{family}'. Supported: {sorted(FAMILY_SCHEMAS)} "
            f"or '{constants.CUSTOM_FAMILY}' with an explicit 'schema'."
        )
    return FAMILY_SCHEMAS[family]


def schema_from_config(dimensions: List[Dict[str, Any]], family: str = constants.CUSTOM_FAMILY) -> HyperparameterSchema:
    """
    Build a schema from a declarative list such as
    ``[{"name": "x", "kind": "numeric-continuous", "scale": "log"}]``.
    """
    if not dimensions:
        raise ConfigurationError("tuning.schema must declare at least one dimension.")

    seen = set()
    built = []
    for entry in dimensions:
        name = entry.get('name')
        kind = entry.get('kind')
        scale = entry.get('scale', constants.LINEAR_SCALE)
        if not name:
            raise ConfigurationError("tuning.schema entries must have a non-empty 'name'.")
        if name in seen:
            raise ConfigurationError(f"tuning.schema declares dimension '{name}' more than once.")
        if kind not in constants.DIMENSION_KINDS:
            raise ConfigurationError(
                f"tuning.schema dimension '{name}' has invalid kind '{kind}'. "
                f"Expected one of {list(constants.DIMENSION_KINDS)}."
            )
        if scale not in constants.SCALES:
            raise ConfigurationError(f"tuning.schema dimension '{name}' has invalid scale '{scale}'.")
        seen.add(name)
        built.append(Dimension(name, kind, scale))

    return HyperparameterSchema(family, tuple(built))


def default_boundaries(family: str, model_type: str = 'regressor') -> Tuple[Dict[str, Tuple[float, float]], Dict[str, List[Any]]]:
    """Return copies of the default numeric and categorical boundaries for a family."""
    numeric = dict(DEFAULT_NUMERIC_BOUNDARIES.get(family, {}))
    strings = {
        k: list(v)
        for k, v in DEFAULT_STRING_BOUNDARIES.get(model_type, {}).get(family, {}).items()
    }
    return numeric, strings
