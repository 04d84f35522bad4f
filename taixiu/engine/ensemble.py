# Ensemble có trọng số của 10 mô hình + độ tin cậy nội bộ

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from taixiu.analytics.markov import MarkovStats, markov1
from taixiu.analytics.patterns import (
    Run, Streak, alternation_score, last_streak, ngram_next, runs,
)
from taixiu.config import TOTAL_MAX, TOTAL_MIN
from taixiu.engine.estimators import (
    ESTIMATOR_NAMES, NGRAM_K, EstimateVector, estimate_all,
)
from taixiu.exceptions import EnsembleError

# Theo thứ tự ESTIMATOR_NAMES; tổng = 1
WEIGHTS: Tuple[float, ...] = (0.12, 0.12, 0.10, 0.08, 0.12, 0.08, 0.08, 0.10, 0.10, 0.10)

CONFIDENCE_BASE = 0.4
CONFIDENCE_SLOPE = 1.2
CONFIDENCE_PER_SAMPLE = 0.01
CONFIDENCE_MAX_SAMPLES = 20


def _clip01(x: float) -> float:
    return max(0.0, min(1.0, x))


@dataclass(frozen=True)
class Combined:
    p_tai: float
    p_xiu: float
    confidence: float


@dataclass(frozen=True)
class EnsembleResult:
    p_tai: float
    p_xiu: float
    confidence: float
    estimates: EstimateVector
    weights: Tuple[float, ...]
    markov: MarkovStats
    streak: Streak
    alternation: float
    ngram: dict
    runs: Tuple[Run, ...]
    balance: float

    @property
    def outcome(self) -> str:
        # hoà -> Tài
        return "T" if self.p_tai >= self.p_xiu else "X"

    @property
    def models(self) -> dict[str, float]:
        return dict(zip(ESTIMATOR_NAMES, self.estimates))


def combine(estimates: Sequence[float], history_length: int) -> Combined:
    """Tích vô hướng với WEIGHTS, kẹp về [0, 1] và tính độ tin cậy.

    Độ tin cậy tăng theo |p_tai - 0.5| và số mẫu (tối đa 20), trần 1.0.
    Sai độ dài vector -> EnsembleError.
    """
    if len(estimates) != len(WEIGHTS):
        raise EnsembleError(
            f"Expected {len(WEIGHTS)} estimates, got {len(estimates)}"
        )
    p_tai = _clip01(sum(m * w for m, w in zip(estimates, WEIGHTS)))
    p_xiu = 1 - p_tai
    samples = min(max(history_length, 0), CONFIDENCE_MAX_SAMPLES)
    confidence = _clip01(
        CONFIDENCE_BASE + abs(p_tai - 0.5) * CONFIDENCE_SLOPE + samples * CONFIDENCE_PER_SAMPLE
    )
    return Combined(p_tai=p_tai, p_xiu=p_xiu, confidence=confidence)


def run_ensemble(
    history: Sequence[str],
    recent_totals: Sequence[float] = (),
    total_min: int = TOTAL_MIN,
    total_max: int = TOTAL_MAX,
    estimates: Optional[EstimateVector] = None,
) -> EnsembleResult:
    # `estimates` truyền sẵn thì bỏ qua ngân hàng mô hình; thống kê phụ luôn tính lại từ history
    history = list(history)
    if estimates is None:
        estimates = estimate_all(history, recent_totals, total_min, total_max)
    combined = combine(estimates, len(history))

    freq = sum(1 for y in history if y == "T") / len(history) if history else 0.5
    return EnsembleResult(
        p_tai=combined.p_tai,
        p_xiu=combined.p_xiu,
        confidence=combined.confidence,
        estimates=tuple(estimates),
        weights=WEIGHTS,
        markov=markov1(history),
        streak=last_streak(history),
        alternation=alternation_score(history),
        ngram=ngram_next(history, NGRAM_K),
        runs=tuple(runs(history)),
        balance=abs(freq - 0.5),
    )
