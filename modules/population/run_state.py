import math
import threading
from collections import deque
from typing import Optional, Tuple

from modules.population.evaluation_result import EvaluationResult
from modules.population.ranking import is_better
from utils.exceptions import ConfigurationError


class RunState:
    """
    Mutable state shared across a continuous evolution run.

    Holds the current best result, submission/completion counters and a rolling
    window of the last N score deltas. Every read-modify-write happens under one
    lock, so concurrent completions can never lose a best-score update.
    """

    def __init__(self, optimization_strategy: str, rolling_improvement_count: int):
        if rolling_improvement_count < 1:
            raise ConfigurationError(
                f"rolling_improvement_count must be >= 1, got {rolling_improvement_count}"
            )
        self.optimization_strategy = optimization_strategy
        self._lock = threading.Lock()
        self._best: Optional[EvaluationResult] = None
        self._submitted = 0
        self._completed = 0
        self._window = deque(maxlen=rolling_improvement_count)

    def register_submission(self) -> int:
        """Count one submission and return its sequence id."""
        with self._lock:
            sequence_id = self._submitted
            self._submitted += 1
            return sequence_id

    def record_completion(self, result: EvaluationResult) -> bool:
        """
        Count a completion, update the best result if strictly improved and push
        the improvement delta into the rolling window.

        Failed results and ties push a zero delta. The first eligible result
        pushes an infinite delta.

        Returns:
            True when the result became the new best.
        """
        with self._lock:
            self._completed += 1
            if not result.eligible:
                self._window.append(0.0)
                return False
            if self._best is None:
                self._best = result
                self._window.append(math.inf)
                return True
            if is_better(result.score, self._best.score, self.optimization_strategy):
                self._window.append(abs(result.score - self._best.score))
                self._best = result
                return True
            self._window.append(0.0)
            return False

    def is_stagnant(self) -> bool:
        """True once a full window of completions shows no improvement."""
        with self._lock:
            return len(self._window) == self._window.maxlen and all(d <= 0 for d in self._window)

    @property
    def best(self) -> Optional[EvaluationResult]:
        with self._lock:
            return self._best

    @property
    def submitted(self) -> int:
        with self._lock:
            return self._submitted

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._submitted - self._completed

    @property
    def window(self) -> Tuple[float, ...]:
        with self._lock:
            return tuple(self._window)
