from typing import Iterable, NamedTuple, Optional, Sequence


class Run(NamedTuple):
    char: str
    length: int


class Streak(NamedTuple):
    char: Optional[str]
    length: int


def runs(labels: Iterable[str]) -> list[Run]:
    """Chia chuỗi thành các run liên tiếp cùng ký tự, cũ -> mới."""
    labels = list(labels)
    out: list[Run] = []
    if not labels:
        return out
    cur = labels[0]
    length = 1
    for lab in labels[1:]:
        if lab == cur:
            length += 1
            continue
        out.append(Run(cur, length))
        cur = lab
        length = 1
    out.append(Run(cur, length))
    return out


def last_streak(labels: Sequence[str]) -> Streak:
    # "TTTXX" -> Streak('X', 2)
    if not labels:
        return Streak(None, 0)
    length = 1
    for i in range(len(labels) - 2, -1, -1):
        if labels[i] != labels[i + 1]:
            break
        length += 1
    return Streak(labels[-1], length)


def mean_run_length(labels: Sequence[str]) -> float:
    rs = runs(labels)
    if not rs:
        return 1.0
    return sum(r.length for r in rs) / len(rs)


def alternation_score(labels: Sequence[str]) -> float:
    """Tỉ lệ vị trí i>=2 có dạng 1-1 (h[i] == h[i-2] != h[i-1])."""
    n = len(labels)
    if n < 3:
        return 0.0
    alt = 0
    for i in range(2, n):
        if labels[i] != labels[i-1] and labels[i-1] != labels[i-2] and labels[i] == labels[i-2]:
            alt += 1
    return alt / (n - 2)


def ngram_next(labels: Sequence[str], k: int = 3) -> dict[str, int]:
    """Đếm ký tự theo sau mọi cửa sổ dài k (chồng lấn) trùng với đuôi k ký tự."""
    counts = {'T': 0, 'X': 0}
    labels = list(labels)
    if len(labels) <= k:
        return counts
    tail = labels[-k:]
    for i in range(len(labels) - k):
        nxt = labels[i + k]
        if labels[i:i+k] == tail and nxt in counts:
            counts[nxt] += 1
    return counts
