import inspect
import logging
from typing import Any, Callable, Dict, List

from sklearn.ensemble import (
    GradientBoostingClassifier,
    GradientBoostingRegressor,
    HistGradientBoostingClassifier,
    HistGradientBoostingRegressor,
    RandomForestClassifier,
    RandomForestRegressor,
)
from sklearn.linear_model import ElasticNet, HuberRegressor, SGDClassifier
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import LinearSVC, LinearSVR
from sklearn.tree import DecisionTreeClassifier, DecisionTreeRegressor

from utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Smallest regularization used where scikit-learn rejects zero
MIN_REGULARIZATION = 1e-6

CRITERIA = {
    'variance': 'squared_error',
    'gini': 'gini',
    'entropy': 'entropy',
}

GBT_LOSSES = {
    'squared': 'squared_error',
    'absolute': 'absolute_error',
    'logistic': 'log_loss',
}


def _is_classifier(model_type: str) -> bool:
    return model_type == 'classifier'


def _max_features(strategy: str, model_type: str) -> Any:
    if strategy == 'auto':
        # Spark picks sqrt for classification, a third of the features for regression
        return 'sqrt' if _is_classifier(model_type) else 1.0 / 3.0
    if strategy == 'all':
        return None
    if strategy == 'onethird':
        return 1.0 / 3.0
    return strategy


def _random_forest(p: Dict[str, Any], model_type: str, seed: int):
    model_class = RandomForestClassifier if _is_classifier(model_type) else RandomForestRegressor
    sub_sampling = float(p.get('subSamplingRate', 1.0))
    return model_class, {
        'n_estimators': int(p['numTrees']),
        'criterion': CRITERIA[p['impurity']],
        'max_depth': int(p['maxDepth']),
        'min_impurity_decrease': float(p['minInfoGain']),
        'max_samples': sub_sampling if sub_sampling < 1.0 else None,
        'max_features': _max_features(p.get('featureSubsetStrategy', 'auto'), model_type),
        'random_state': seed,
    }


def _trees(p: Dict[str, Any], model_type: str, seed: int):
    model_class = DecisionTreeClassifier if _is_classifier(model_type) else DecisionTreeRegressor
    return model_class, {
        'criterion': CRITERIA[p['impurity']],
        'max_depth': int(p['maxDepth']),
        'min_impurity_decrease': float(p['minInfoGain']),
        'min_samples_leaf': int(p['minInstancesPerNode']),
        'random_state': seed,
    }


def _gbt(p: Dict[str, Any], model_type: str, seed: int):
    model_class = GradientBoostingClassifier if _is_classifier(model_type) else GradientBoostingRegressor
    return model_class, {
        'loss': GBT_LOSSES[p['lossType']],
        'max_depth': int(p['maxDepth']),
        'n_estimators': int(p['maxIter']),
        'min_impurity_decrease': float(p['minInfoGain']),
        'min_samples_leaf': int(p['minInstancesPerNode']),
        'learning_rate': float(p['stepSize']),
        'random_state': seed,
    }


def _linear_regression(p: Dict[str, Any], model_type: str, seed: int):
    if p.get('loss') == 'huber':
        return HuberRegressor, {
            'alpha': float(p['regParam']),
            'fit_intercept': bool(p['fitIntercept']),
            'max_iter': int(p['maxIter']),
            'tol': float(p['tolerance']),
        }
    return ElasticNet, {
        'alpha': max(float(p['regParam']), MIN_REGULARIZATION),
        'l1_ratio': float(p['elasticNetParams']),
        'fit_intercept': bool(p['fitIntercept']),
        'max_iter': int(p['maxIter']),
        'tol': float(p['tolerance']),
        'random_state': seed,
    }


def _logistic_regression(p: Dict[str, Any], model_type: str, seed: int):
    return SGDClassifier, {
        'loss': 'log_loss',
        'penalty': 'elasticnet',
        'alpha': max(float(p['regParam']), MIN_REGULARIZATION),
        'l1_ratio': float(p['elasticNetParams']),
        'fit_intercept': bool(p['fitIntercept']),
        'max_iter': int(p['maxIter']),
        'tol': float(p['tolerance']),
        'random_state': seed,
    }


def _svm(p: Dict[str, Any], model_type: str, seed: int):
    model_class = LinearSVC if _is_classifier(model_type) else LinearSVR
    return model_class, {
        'C': 1.0 / max(float(p['regParam']), MIN_REGULARIZATION),
        'fit_intercept': bool(p['fitIntercept']),
        'max_iter': int(p['maxIter']),
        'tol': float(p['tol']),
        'random_state': seed,
    }


def _xgboost(p: Dict[str, Any], model_type: str, seed: int):
    # alpha, gamma, subSample and trainTestRatio have no histogram-boosting counterpart
    model_class = HistGradientBoostingClassifier if _is_classifier(model_type) else HistGradientBoostingRegressor
    return model_class, {
        'learning_rate': float(p['eta']),
        'max_depth': int(p['maxDepth']),
        'max_iter': int(p['numRound']),
        'max_bins': min(max(int(p['maxBins']), 2), 255),
        'l2_regularization': float(p['lambda']),
        'min_samples_leaf': max(1, int(round(float(p['minChildWeight'])))),
        'random_state': seed,
    }


class EstimatorRegistry:
    """
    Factory for scikit-learn estimators keyed by model family.

    Translates Spark-style hyperparameter names (numTrees, regParam, ...) into
    the matching scikit-learn constructor arguments. Families with a
    'standardization' hyperparameter are wrapped in a StandardScaler pipeline
    when it is enabled.
    """

    BUILDERS: Dict[str, Callable] = {
        'RandomForest': _random_forest,
        'Trees': _trees,
        'GBT': _gbt,
        'LinearRegression': _linear_regression,
        'LogisticRegression': _logistic_regression,
        'SVM': _svm,
        'XGBoost': _xgboost,
    }

    @classmethod
    def create(cls, model_family: str, params: Dict[str, Any],
               model_type: str = 'regressor', seed: int = 42) -> Any:
        """Create and return an unfitted estimator for one candidate's hyperparameters."""
        if model_family not in cls.BUILDERS:
            raise ConfigurationError(
                f"No scikit-learn estimator for model family '{model_family}'. "
                f"Available: {cls.get_available_families()}"
            )

        model_class, kwargs = cls.BUILDERS[model_family](params, model_type, seed)
        estimator = model_class(**cls._filter_params(model_class, kwargs))

        if params.get('standardization', False):
            return Pipeline([('scaler', StandardScaler()), ('model', estimator)])
        return estimator

    @classmethod
    def get_available_families(cls) -> List[str]:
        """Return list of all supported model families."""
        return list(cls.BUILDERS.keys())

    @staticmethod
    def _filter_params(model_class, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Remove parameters from `params` that are not accepted by `model_class` constructor.
        """
        sig = inspect.signature(model_class.__init__)

        valid_keys = [
            p.name for p in sig.parameters.values()
            if p.kind in (p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
        ]

        if any(p.kind == p.VAR_KEYWORD for p in sig.parameters.values()):
            return params

        dropped = sorted(set(params) - set(valid_keys))
        if dropped:
            logger.debug(f"{model_class.__name__} does not accept {dropped}; ignoring them.")
        return {k: v for k, v in params.items() if k in valid_keys}
