"""
Evolution Engine
================

Responsibility:
- Generation-synchronous (batch) evolution with a hard generation barrier.
- Asynchronous (continuous) evolution with replacement-on-completion
  scheduling, score-threshold and stagnation stopping, and a drain phase.
- Strategy selection and report aggregation via TuningEngine.
"""

from .batch_scheduler import BatchEvolutionScheduler
from .continuous_scheduler import ContinuousEvolutionScheduler
from .stopping_criteria import StoppingCriteria
from .tuning_engine import TuningEngine

__all__ = [
    'BatchEvolutionScheduler',
    'ContinuousEvolutionScheduler',
    'StoppingCriteria',
    'TuningEngine',
]
