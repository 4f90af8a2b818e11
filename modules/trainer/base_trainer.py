import abc
import logging
import math
import numbers
import time
from typing import Any, Dict, Mapping, NamedTuple, Optional

from modules.population import EvaluationResult
from modules.search_space import Candidate
from utils.exceptions import EvaluationError


class TrainerResult(NamedTuple):
    """What a trainer hands back for one candidate."""
    score: float
    metrics: Optional[Dict[str, Any]] = None
    model_artifact: Any = None


class BaseTrainer(abc.ABC):
    """
    Contract for the external model-fit/score collaborator.

    ``evaluate`` is invoked concurrently from worker threads and must be safe
    for concurrent use. It may raise; the engine records the failure on the
    candidate's result instead of aborting the run.
    """

    @abc.abstractmethod
    def evaluate(self, candidate: Candidate) -> TrainerResult:
        raise NotImplementedError("Subclasses must implement evaluate.")


def _coerce_output(output: Any) -> TrainerResult:
    if isinstance(output, TrainerResult):
        pass
    elif isinstance(output, numbers.Real):
        output = TrainerResult(float(output))
    elif isinstance(output, (tuple, list)) and 1 <= len(output) <= 3:
        output = TrainerResult(*output)
    else:
        raise EvaluationError(f"Trainer returned unsupported output type: {type(output).__name__}")

    if output.metrics is not None and not isinstance(output.metrics, Mapping):
        raise EvaluationError(f"Trainer metrics must be a mapping, got {type(output.metrics).__name__}")
    return output


def run_trial(trainer: Any, candidate: Candidate, generation: int, sequence_id: int,
              logger: Optional[logging.Logger] = None) -> EvaluationResult:
    """
    Evaluate one candidate exactly once and wrap the outcome as an EvaluationResult.

    Any exception raised by the trainer, or a non-finite score, produces a
    failed result. Nothing is retried.
    """
    logger = logger or logging.getLogger(__name__)
    submitted_at = time.monotonic()
    try:
        output = _coerce_output(trainer.evaluate(candidate))
        score = float(output.score)
        if not math.isfinite(score):
            raise EvaluationError(f"Trainer returned non-finite score {score}")
        return EvaluationResult.success(
            candidate, score, generation, sequence_id,
            metrics=output.metrics or {}, model_artifact=output.model_artifact,
            submitted_at=submitted_at, completed_at=time.monotonic(),
        )
    except Exception as e:
        logger.error(f"Evaluation failed for trial {sequence_id} (generation {generation}) {candidate}: {e}")
        return EvaluationResult.failure(
            candidate, generation, sequence_id, error=f"{type(e).__name__}: {e}",
            submitted_at=submitted_at, completed_at=time.monotonic(),
        )
