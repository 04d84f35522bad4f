from typing import Any, Optional

Label = str  # "T" (Tài) | "X" (Xỉu)

TAI = "T"
XIU = "X"
SYMBOLS = (TAI, XIU)

_ALIASES = {
    "t": TAI, "tai": TAI, "tài": TAI,
    "x": XIU, "xiu": XIU, "xỉu": XIU,
}

def normalize_outcome(raw: Any) -> Optional[Label]:
    """Chuẩn hoá nhãn kết quả tự do về "T" | "X"; không nhận ra -> None."""
    if raw is None:
        return None
    t = str(raw).strip().lower()
    if not t:
        return None
    return _ALIASES.get(t)

def is_valid_outcome(s: Any) -> bool:
    return s in SYMBOLS

def to_display(label: Label) -> str:
    return "Tài" if label == TAI else "Xỉu"

def to_result(label: Optional[Label]) -> Optional[str]:
    if label == TAI:
        return "TAI"
    if label == XIU:
        return "XIU"
    return None
