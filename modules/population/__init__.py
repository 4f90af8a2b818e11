"""
Population Module
=================

Responsibility:
- Immutable EvaluationResult records.
- The append-only, lock-guarded Population shared by schedulers and reporting.
- RunState for continuous evolution (best score, counters, rolling window).
- Directional ranking helpers.
"""

from .evaluation_result import EvaluationResult
from .population import Population
from .run_state import RunState
from .ranking import is_better, meets_threshold, rank, best_result

__all__ = [
    'EvaluationResult',
    'Population',
    'RunState',
    'is_better',
    'meets_threshold',
    'rank',
    'best_result',
]
