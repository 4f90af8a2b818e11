"""
Trainer Module
==============

Responsibility:
- Contract for the model fit/score collaborator (BaseTrainer, TrainerResult).
- Single-shot evaluation of a candidate into an EvaluationResult, recording failures.
- Reference scikit-learn trainer with cross-validated scoring.
"""

from .base_trainer import BaseTrainer, TrainerResult, run_trial
from .estimator_registry import EstimatorRegistry
from .sklearn_trainer import SklearnTrainer

__all__ = ['BaseTrainer', 'TrainerResult', 'run_trial', 'EstimatorRegistry', 'SklearnTrainer']
