import math
from dataclasses import asdict, dataclass, fields
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from modules.population import EvaluationResult, best_result

GROUP_BY_GENERATION = "generation"
GROUP_BY_WINDOW = "window"

RESULT_COLUMNS = ["sequence_id", "generation", "score", "failed", "error"]


@dataclass(frozen=True)
class GroupStatistics:
    """Score statistics for one generation (batch) or completion window (continuous)."""
    index: int
    mean_score: float
    std_score: float
    best_score: float
    successful: int
    failed: int


@dataclass(frozen=True)
class TuningReport:
    """Everything the caller needs from a finished (or in-progress) run."""
    results: Tuple[EvaluationResult, ...]
    statistics: Tuple[GroupStatistics, ...]
    best: Optional[EvaluationResult]
    optimization_strategy: str
    grouping: str
    model_family: str = ""
    stop_reason: str = ""

    def results_frame(self) -> pd.DataFrame:
        """One row per evaluated candidate."""
        df = pd.DataFrame([r.to_record() for r in self.results])
        if df.empty:
            df = pd.DataFrame(columns=RESULT_COLUMNS)
        if self.model_family:
            df['model_family'] = self.model_family
        return df

    def statistics_frame(self) -> pd.DataFrame:
        """One row per generation/window with mean and standard deviation of scores."""
        df = pd.DataFrame([asdict(s) for s in self.statistics])
        if df.empty:
            df = pd.DataFrame(columns=[f.name for f in fields(GroupStatistics)])
        df = df.rename(columns={'index': self.grouping})
        if self.model_family:
            df['model_family'] = self.model_family
        return df


def _summarize(index: int, group: Sequence[EvaluationResult], strategy: str) -> GroupStatistics:
    scores = np.array([r.score for r in group if r.eligible], dtype=float)
    if scores.size:
        best = best_result(group, strategy).score
        mean, std = float(np.mean(scores)), float(np.std(scores))
    else:
        best = mean = std = math.nan
    return GroupStatistics(
        index=index,
        mean_score=mean,
        std_score=std,
        best_score=best,
        successful=int(scores.size),
        failed=len(group) - int(scores.size),
    )


def generation_statistics(results: Iterable[EvaluationResult], strategy: str) -> List[GroupStatistics]:
    """Per-generation statistics, ordered by generation index."""
    groups: Dict[int, List[EvaluationResult]] = {}
    for result in results:
        groups.setdefault(result.generation, []).append(result)
    return [_summarize(g, groups[g], strategy) for g in sorted(groups)]


def window_statistics(results: Sequence[EvaluationResult], window_size: int,
                      strategy: str) -> List[GroupStatistics]:
    """Statistics over consecutive fixed-size windows of results in recording order."""
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")
    results = list(results)
    return [
        _summarize(i // window_size, results[i:i + window_size], strategy)
        for i in range(0, len(results), window_size)
    ]


def aggregate(results: Iterable[EvaluationResult], optimization_strategy: str,
              window_size: Optional[int] = None, model_family: str = "",
              stop_reason: str = "") -> TuningReport:
    """
    Build a TuningReport from population results.

    Pure function: safe to call mid-run on ``population.snapshot()`` for
    progress inspection. Groups by generation unless a window size is given.
    """
    results = tuple(results)
    if window_size:
        statistics = window_statistics(results, window_size, optimization_strategy)
        grouping = GROUP_BY_WINDOW
    else:
        statistics = generation_statistics(results, optimization_strategy)
        grouping = GROUP_BY_GENERATION

    return TuningReport(
        results=results,
        statistics=tuple(statistics),
        best=best_result(results, optimization_strategy),
        optimization_strategy=optimization_strategy,
        grouping=grouping,
        model_family=model_family,
        stop_reason=stop_reason,
    )
