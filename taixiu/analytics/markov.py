from dataclasses import dataclass, field
from typing import Optional, Sequence

SYMBOLS = ('T', 'X')


def _empty_counts() -> dict[str, dict[str, int]]:
    return {'T': {'T': 0, 'X': 0}, 'X': {'T': 0, 'X': 0}}


@dataclass(frozen=True)
class MarkovStats:
    counts: dict[str, dict[str, int]] = field(default_factory=_empty_counts)
    probs: dict[str, float] = field(default_factory=lambda: {'T': 0.5, 'X': 0.5})
    last_label: Optional[str] = None


def transition_counts(labels: Sequence[str]) -> dict[str, dict[str, int]]:
    C = _empty_counts()
    for a, b in zip(labels, labels[1:]):
        if a in SYMBOLS and b in SYMBOLS:
            C[a][b] += 1
    return C


def markov1(labels: Sequence[str]) -> MarkovStats:
    """Markov bậc 1: P(next | ký tự cuối), không làm trơn; thiếu dữ liệu -> 0.5/0.5."""
    C = transition_counts(labels)
    last = labels[-1] if labels else None
    probs = {'T': 0.5, 'X': 0.5}
    if last in SYMBOLS:
        nT = C[last]['T']; nX = C[last]['X']
        if nT + nX > 0:
            probs = {'T': nT / (nT + nX), 'X': nX / (nT + nX)}
    return MarkovStats(counts=C, probs=probs, last_label=last)
