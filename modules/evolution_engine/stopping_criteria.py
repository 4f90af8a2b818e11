import logging
from typing import Optional, Tuple

from modules.population import EvaluationResult, RunState, meets_threshold


class StoppingCriteria:
    """
    Evaluates whether an evolution run should stop issuing new work.

    Strategies:
    - score threshold: stop once the best score meets the configured stopping
      score (>= when maximizing, <= when minimizing).
    - stagnation (continuous only): stop once the rolling window of recent
      completions shows no improvement over the best recorded before it.
    - iteration cap (continuous only): stop once the submission cap is reached.
    """

    def __init__(self, optimization_strategy: str, stopping_score: Optional[float],
                 logger: logging.Logger, max_iterations: Optional[int] = None):
        self.optimization_strategy = optimization_strategy
        self.stopping_score = stopping_score
        self.max_iterations = max_iterations
        self.logger = logger

    def score_reached(self, best: Optional[EvaluationResult]) -> Tuple[bool, str]:
        if self.stopping_score is None or best is None:
            return False, ""
        if meets_threshold(best.score, self.stopping_score, self.optimization_strategy):
            return True, (f"Stopping score reached: {best.score:.6g} meets "
                          f"{self.stopping_score:.6g} ({self.optimization_strategy})")
        return False, ""

    def should_stop(self, state: RunState) -> Tuple[bool, str]:
        """
        Continuous-mode check, run after every completion.

        Returns:
            (bool, reason_string)
        """
        stop, reason = self.score_reached(state.best)
        if stop:
            return stop, reason

        if state.is_stagnant():
            return True, f"No improvement over the last {len(state.window)} completions"

        if self.max_iterations is not None and state.submitted >= self.max_iterations:
            return True, f"Maximum iterations reached ({self.max_iterations})"

        return False, ""
