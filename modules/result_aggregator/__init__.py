"""
Result Aggregator
=================

Responsibility:
- Per-generation (batch) or per completion window (continuous) mean and
  standard deviation of successful scores.
- Flat result list and single best result by optimization strategy.
- DataFrame views of both for export.
- Typed Candidates rebuilt from an exported results table.
"""

from .result_aggregator import (
    GroupStatistics,
    TuningReport,
    aggregate,
    generation_statistics,
    window_statistics,
)
from .candidate_reader import candidates_from_frame

__all__ = [
    'GroupStatistics',
    'TuningReport',
    'aggregate',
    'candidates_from_frame',
    'generation_statistics',
    'window_statistics',
]
