import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from modules.search_space import Candidate


@dataclass(frozen=True)
class EvaluationResult:
    """
    Outcome of evaluating one candidate.

    Failed evaluations carry a NaN score and are excluded from ranking and
    statistics; they still count towards the population for provenance.
    """
    candidate: Candidate
    score: float
    generation: int
    sequence_id: int
    metrics: Mapping[str, Any] = field(default_factory=dict, hash=False)
    model_artifact: Any = field(default=None, hash=False, compare=False)
    failed: bool = False
    error: Optional[str] = None
    submitted_at: Optional[float] = field(default=None, compare=False)
    completed_at: Optional[float] = field(default=None, compare=False)

    def __post_init__(self):
        # Freeze the metrics mapping so results cannot be altered after insertion
        object.__setattr__(self, 'metrics', MappingProxyType(dict(self.metrics)))

    @classmethod
    def success(cls, candidate: Candidate, score: float, generation: int, sequence_id: int,
                metrics: Optional[Mapping[str, Any]] = None, model_artifact: Any = None,
                submitted_at: Optional[float] = None,
                completed_at: Optional[float] = None) -> 'EvaluationResult':
        return cls(candidate=candidate, score=float(score), generation=generation,
                   sequence_id=sequence_id, metrics=metrics or {}, model_artifact=model_artifact,
                   submitted_at=submitted_at, completed_at=completed_at)

    @classmethod
    def failure(cls, candidate: Candidate, generation: int, sequence_id: int, error: str,
                submitted_at: Optional[float] = None,
                completed_at: Optional[float] = None) -> 'EvaluationResult':
        return cls(candidate=candidate, score=math.nan, generation=generation,
                   sequence_id=sequence_id, failed=True, error=error,
                   submitted_at=submitted_at, completed_at=completed_at)

    @property
    def eligible(self) -> bool:
        """True when the result may take part in ranking and statistics."""
        return not self.failed and math.isfinite(self.score)

    def to_record(self) -> Dict[str, Any]:
        """Flat dict used for report tables."""
        record = {
            'sequence_id': self.sequence_id,
            'generation': self.generation,
            'score': self.score,
            'failed': self.failed,
            'error': self.error,
        }
        record.update({f"param_{k}": v for k, v in self.candidate.values})
        record.update({f"metric_{k}": v for k, v in self.metrics.items()})
        return record
