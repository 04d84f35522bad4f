# Sinh đoạn giải thích "AI TỔNG HỢP" (tiếng Việt) từ kết quả ensemble
from typing import Sequence

from taixiu.engine.ensemble import EnsembleResult


def _pct(p: float) -> str:
    return f"{p * 100:.2f}%"


def build_explanation(history: Sequence[str], ens: EnsembleResult) -> str:
    history = list(history)
    n_tai = sum(1 for y in history if y == "T")
    n_xiu = sum(1 for y in history if y == "X")
    st = ens.streak
    mk = ens.markov
    C = mk.counts
    last = history[-1] if history else "-"
    last_runs = ", ".join(f"{r.char}:{r.length}" for r in ens.runs[-3:])

    lines = [
        f"AI TỔNG HỢP phân tích {len(history)} mẫu gần nhất: [{''.join(history) or '-'}] (T=Tài, X=Xỉu).",
        f"1) Thống kê: T={n_tai}, X={n_xiu}, chuỗi cuối: {st.char or '-'} x{st.length}.",
        f"2) Markov(1): từ {last} → P(T={mk.probs['T']:.2f}, X={mk.probs['X']:.2f}), "
        f"số lần chuyển: T→T={C['T']['T']}, T→X={C['T']['X']}, X→T={C['X']['T']}, X→X={C['X']['X']}.",
        f"3) Cầu luân phiên 1-1: điểm ≈ {ens.alternation:.2f}.",
        f"4) N-gram (k=3): sau đuôi gần nhất từng ra T={ens.ngram.get('T', 0)}, X={ens.ngram.get('X', 0)}.",
        f"5) Các run gần nhất: {last_runs or '-'}.",
        f"6) Ensemble 10 mô hình (không random): Tài={_pct(ens.p_tai)}, Xỉu={_pct(ens.p_xiu)}.",
        "→ Chọn cửa có xác suất cao hơn, kèm độ tin cậy nội bộ.",
    ]
    return " ".join(lines)
