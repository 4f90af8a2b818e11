import logging
import uuid
from pathlib import Path
from typing import Any, Optional, Union

import joblib
import numpy as np
from sklearn.base import clone
from sklearn.model_selection import KFold, StratifiedKFold, cross_validate

from modules.search_space import Candidate
from modules.trainer.base_trainer import BaseTrainer, TrainerResult
from modules.trainer.estimator_registry import EstimatorRegistry

DEFAULT_SCORING = {
    'regressor': 'neg_root_mean_squared_error',
    'classifier': 'accuracy',
}


class SklearnTrainer(BaseTrainer):
    """
    Reference trainer: K-fold cross-validation of a scikit-learn estimator.

    Holds only read-only data after construction, so concurrent ``evaluate``
    calls from the schedulers' worker threads never share mutable state.
    """

    def __init__(self, X, y, model_family: str, model_type: str = 'regressor',
                 scoring: Optional[str] = None, cv_folds: int = 3, seed: int = 42,
                 n_jobs: int = 1, fit_final_model: bool = True,
                 artifact_dir: Optional[Union[str, Path]] = None,
                 logger: Optional[logging.Logger] = None):
        if cv_folds < 2:
            raise ValueError(f"cv_folds must be >= 2, got {cv_folds}.")
        self.X = X
        self.y = y
        self.model_family = model_family
        self.model_type = model_type
        self.scoring = scoring or DEFAULT_SCORING[model_type]
        self.cv_folds = cv_folds
        self.seed = seed
        self.n_jobs = n_jobs
        self.fit_final_model = fit_final_model
        self.artifact_dir = Path(artifact_dir) if artifact_dir else None
        self.logger = logger or logging.getLogger(__name__)

        if self.artifact_dir:
            self.artifact_dir.mkdir(parents=True, exist_ok=True)

    def _splitter(self):
        if self.model_type == 'classifier':
            return StratifiedKFold(n_splits=self.cv_folds, shuffle=True, random_state=self.seed)
        return KFold(n_splits=self.cv_folds, shuffle=True, random_state=self.seed)

    def evaluate(self, candidate: Candidate) -> TrainerResult:
        """Cross-validate the candidate; the score is the mean test score across folds."""
        params = candidate.as_dict()
        estimator = EstimatorRegistry.create(self.model_family, params, self.model_type, self.seed)

        cv_results = cross_validate(
            estimator, self.X, self.y,
            cv=self._splitter(), scoring=self.scoring,
            n_jobs=self.n_jobs, error_score='raise',
        )
        test_scores = np.asarray(cv_results['test_score'], dtype=float)
        metrics = {
            f'cv_{self.scoring}_mean': float(np.mean(test_scores)),
            f'cv_{self.scoring}_std': float(np.std(test_scores)),
            'fit_time_mean': float(np.mean(cv_results['fit_time'])),
        }

        return TrainerResult(float(np.mean(test_scores)), metrics, self._final_model(estimator))

    def _final_model(self, estimator) -> Any:
        if not self.fit_final_model:
            return None

        model = clone(estimator).fit(self.X, self.y)
        if self.artifact_dir is None:
            return model

        model_path = self.artifact_dir / f"{self.model_family}_{uuid.uuid4().hex}.joblib"
        joblib.dump(model, model_path)
        self.logger.debug(f"Model saved to {model_path}")
        return str(model_path)
