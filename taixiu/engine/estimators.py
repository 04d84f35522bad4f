# Ngân hàng 10 mô hình heuristic cho P(next = Tài); tất cả thuần, không random
from __future__ import annotations
from types import MappingProxyType
from typing import Callable, Mapping, Sequence, Tuple
import re

from taixiu.analytics.markov import markov1
from taixiu.analytics.patterns import (
    alternation_score, last_streak, mean_run_length, ngram_next, runs,
)
from taixiu.config import TOTAL_MIN, TOTAL_MAX

Label = str  # "T" | "X"
EstimateVector = Tuple[float, ...]

NGRAM_K = 3
MOMENTUM_WINDOW = 5

# "Mẫu cầu" theo độ dài các run gần nhất -> xác suất nền
RHYTHM_BIAS: Mapping[str, float] = MappingProxyType({
    "1-1": 0.55, "1-2-1": 0.58, "2-1-2": 0.58,
    "2-2": 0.57, "3-1": 0.55, "1-3": 0.55,
    "2-3": 0.56, "3-2": 0.56, "4-1": 0.58, "1-4": 0.58,
})

_KEY_RE = re.compile(r"[1-9]\d*(-[1-9]\d*)*")

def validate_bias_map(table: Mapping[str, float]) -> None:
    for key, base in table.items():
        if not _KEY_RE.fullmatch(key):
            raise ValueError(f"bad rhythm key {key!r}")
        if not 0.0 < base < 1.0:
            raise ValueError(f"rhythm bias for {key!r} must be in (0, 1), got {base}")

validate_bias_map(RHYTHM_BIAS)


def _clip01(x: float) -> float:
    return max(0.0, min(1.0, x))

def _share_tai(labels: Sequence[Label]) -> float:
    if not labels:
        return 0.5
    return sum(1 for y in labels if y == "T") / len(labels)


# 1) Tần suất toàn cục
def frequency(history: Sequence[Label]) -> float:
    return _share_tai(history)

# 2) Markov bậc 1
def markov(history: Sequence[Label]) -> float:
    return markov1(history).probs["T"]

# 3) Streak: ngắn -> đảo chiều nhẹ, 3 -> tiếp diễn nhẹ, >=4 -> tiếp diễn
def streak_reversal(history: Sequence[Label]) -> float:
    st = last_streak(history)
    if st.char is None:
        return 0.5
    if st.length <= 2:
        return 0.35 if st.char == "T" else 0.65
    if st.length == 3:
        return 0.55 if st.char == "T" else 0.45
    return 0.60 if st.char == "T" else 0.40

# 4) Cầu 1-1: điểm luân phiên cao -> nghiêng về đảo chiều
def alternation(history: Sequence[Label]) -> float:
    alt = alternation_score(history)
    if history and history[-1] == "T":
        return 0.5 - 0.3 * alt
    return 0.5 + 0.3 * alt

# 5) N-gram k=3 trên mọi cửa sổ chồng lấn
def kgram(history: Sequence[Label], k: int = NGRAM_K) -> float:
    ng = ngram_next(history, k)
    total = ng["T"] + ng["X"]
    return ng["T"] / total if total > 0 else 0.5

# 6) Đà 5 phiên gần nhất
def momentum(history: Sequence[Label], window: int = MOMENTUM_WINDOW) -> float:
    k = min(window, len(history))
    return _share_tai(history[len(history) - k:]) if k else 0.5

# 7) Streak có trọng số theo độ dài run trung bình
def run_weighted_streak(history: Sequence[Label]) -> float:
    st = last_streak(history)
    if st.char is None:
        return 0.5
    bias = 0.05 * (st.length / mean_run_length(history))
    return _clip01(0.45 + bias) if st.char == "T" else _clip01(0.55 - bias)

# 8) Độ lệch tổng quan được khuếch đại theo chính nó
def balance(history: Sequence[Label]) -> float:
    freq = _share_tai(history)
    dev = abs(freq - 0.5)
    return _clip01(0.5 + (freq - 0.5) * (0.8 + dev))

# 9) Tổng điểm gần đây: tổng cao -> nghiêng Tài (0.4..0.8)
def aggregate_total(recent_totals: Sequence[float],
                    total_min: int = TOTAL_MIN, total_max: int = TOTAL_MAX) -> float:
    if not recent_totals:
        return 0.5
    avg = sum(recent_totals) / len(recent_totals)
    span = (total_max - total_min) or 1
    norm = _clip01((avg - total_min) / span)
    return 0.4 + 0.4 * norm

def rhythm_key(history: Sequence[Label]) -> str | None:
    rs = runs(history)
    if len(rs) < 3:
        return None
    return "-".join(str(r.length) for r in rs[-3:])

# 10) Nhịp cầu: tra bảng theo độ dài 3 run cuối
def rhythm(history: Sequence[Label], table: Mapping[str, float] = RHYTHM_BIAS) -> float:
    key = rhythm_key(history)
    if key is None:
        return 0.5
    base = table.get(key, 0.5)
    return base if history[-1] == "T" else 1 - base


HISTORY_ESTIMATORS: Tuple[Tuple[str, Callable[[Sequence[Label]], float]], ...] = (
    ("frequency", frequency),
    ("markov", markov),
    ("streak", streak_reversal),
    ("alternation", alternation),
    ("ngram", kgram),
    ("momentum", momentum),
    ("run_length", run_weighted_streak),
    ("balance", balance),
)

ESTIMATOR_NAMES: Tuple[str, ...] = tuple(n for n, _ in HISTORY_ESTIMATORS) + ("totals", "rhythm")


def estimate_all(history: Sequence[Label], recent_totals: Sequence[float] = (),
                 total_min: int = TOTAL_MIN, total_max: int = TOTAL_MAX) -> EstimateVector:
    """Chạy cả 10 mô hình, trả về vector theo thứ tự ESTIMATOR_NAMES."""
    history = list(history)
    out = [fn(history) for _, fn in HISTORY_ESTIMATORS]
    out.append(aggregate_total(list(recent_totals), total_min, total_max))
    out.append(rhythm(history))
    return tuple(out)
