import threading
from typing import Iterable, List, Tuple

from modules.population.evaluation_result import EvaluationResult


class Population:
    """
    Append-only record of every EvaluationResult in a run.

    Appends and reads are guarded by a lock so completions racing from worker
    threads and progress inspection from the caller never observe a torn list.
    """

    def __init__(self):
        self._results: List[EvaluationResult] = []
        self._lock = threading.Lock()

    def append(self, result: EvaluationResult) -> int:
        """Record one result and return the new population size."""
        with self._lock:
            self._results.append(result)
            return len(self._results)

    def extend(self, results: Iterable[EvaluationResult]) -> int:
        with self._lock:
            self._results.extend(results)
            return len(self._results)

    def snapshot(self) -> Tuple[EvaluationResult, ...]:
        """Immutable view of the results recorded so far, in recording order."""
        with self._lock:
            return tuple(self._results)

    def generation(self, index: int) -> List[EvaluationResult]:
        return [r for r in self.snapshot() if r.generation == index]

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def __iter__(self):
        return iter(self.snapshot())
