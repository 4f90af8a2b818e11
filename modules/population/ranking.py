from typing import Iterable, List, Optional

from modules.population.evaluation_result import EvaluationResult
from utils import constants


def is_better(score: float, reference: float, strategy: str) -> bool:
    """Strict directional comparison; ties are never an improvement."""
    if strategy == constants.MAXIMIZE:
        return score > reference
    return score < reference


def meets_threshold(score: float, threshold: float, strategy: str) -> bool:
    """Stop condition: >= threshold when maximizing, <= when minimizing."""
    if strategy == constants.MAXIMIZE:
        return score >= threshold
    return score <= threshold


def rank(results: Iterable[EvaluationResult], strategy: str) -> List[EvaluationResult]:
    """
    Eligible results ordered best first.

    The sort is stable, so equal scores keep their recording order.
    """
    eligible = [r for r in results if r.eligible]
    return sorted(eligible, key=lambda r: r.score, reverse=(strategy == constants.MAXIMIZE))


def best_result(results: Iterable[EvaluationResult], strategy: str) -> Optional[EvaluationResult]:
    ranked = rank(results, strategy)
    return ranked[0] if ranked else None
