from dataclasses import dataclass, field
from typing import Optional

from taixiu.config import settings
from taixiu.core.labels import normalize_outcome, to_display, to_result
from taixiu.engine.ensemble import EnsembleResult, run_ensemble
from taixiu.engine.explain import build_explanation
from taixiu.exceptions import MalformedSourcePayload
from taixiu.history import HistoryStore
from taixiu.logger import get_logger
from taixiu.source import SessionSource

logger = get_logger(__name__)

RECENT_TOTALS_WINDOW = 20


def _pct(p: float) -> str:
    return f"{p * 100:.2f}%"


def _is_number(x) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


@dataclass
class PredictionReport:
    session: int
    dice: list
    total: Optional[float]
    result: Optional[str]
    next_session: int
    du_doan: str
    do_tin_cay: str
    ty_le: dict
    giai_thich: str
    pattern: list
    id: str
    ensemble: Optional[EnsembleResult] = field(default=None, repr=False)

    def to_payload(self) -> dict:
        return {
            'session': self.session,
            'dice': self.dice,
            'total': self.total,
            'result': self.result,
            'next_session': self.next_session,
            'du_doan': self.du_doan,
            'do_tin_cay': self.do_tin_cay,
            'giai_thich': self.giai_thich,
            'pattern': self.pattern,
            'ty_le': self.ty_le,
            'id': self.id,
        }


def _is_int(x) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


def latest_session(items: list[dict]) -> dict:
    # phiên mới nhất = id lớn nhất; id phải là số nguyên
    valid = [x for x in items if _is_int(x.get('id'))]
    if not valid:
        raise MalformedSourcePayload("Không có phiên nào mang id hợp lệ.")
    return max(valid, key=lambda x: x['id'])


def clean_fields(latest: dict) -> tuple[list, Optional[float], Optional[str]]:
    """Kiểm tra dices / point / resultTruyenThong của phiên mới nhất trước khi dùng."""
    dice = latest.get('dices')
    if dice is None:
        dice = []
    if not isinstance(dice, list) or not all(_is_int(d) for d in dice):
        raise MalformedSourcePayload(f"Phiên {latest.get('id')}: dices không hợp lệ ({dice!r}).")
    total = latest.get('point')
    if total is not None and not _is_number(total):
        raise MalformedSourcePayload(f"Phiên {latest.get('id')}: point không hợp lệ ({total!r}).")
    raw = latest.get('resultTruyenThong')
    if raw is not None and not isinstance(raw, str):
        raise MalformedSourcePayload(f"Phiên {latest.get('id')}: resultTruyenThong không hợp lệ ({raw!r}).")
    return dice, total, raw or None


def recent_totals(items: list[dict], window: int = RECENT_TOTALS_WINDOW) -> list[float]:
    tail = items[-min(window, len(items)):] if items else []
    return [x['point'] for x in tail if _is_number(x.get('point'))]


class TaiXiuPredictor:
    """Lấy phiên mới nhất, cập nhật lịch sử và dự đoán phiên kế tiếp."""

    def __init__(self, source: SessionSource, store: HistoryStore,
                 total_min: int = settings.total_min, total_max: int = settings.total_max,
                 tag: str = settings.report_tag):
        self.source = source
        self.store = store
        self.total_min = total_min
        self.total_max = total_max
        self.tag = tag

    def predict(self) -> PredictionReport:
        items = self.source.fetch_sessions()
        latest = latest_session(items)
        session = latest['id']
        dice, total, raw = clean_fields(latest)
        label = normalize_outcome(raw)

        if label:
            pattern = list(self.store.record(label, session_id=session))
        else:
            logger.warning("Session %s has unrecognized result %r, history unchanged", session, raw)
            pattern = list(self.store.snapshot())

        ens = run_ensemble(pattern, recent_totals(items), self.total_min, self.total_max)
        guess = ens.outcome
        logger.info("Session %s -> next %s: %s (pT=%.4f, conf=%.4f, n=%d)",
                    session, session + 1, guess, ens.p_tai, ens.confidence, len(pattern))

        return PredictionReport(
            session=session,
            dice=dice,
            total=total,
            result=raw or to_result(label),
            next_session=session + 1,
            du_doan=to_display(guess),
            do_tin_cay=_pct(ens.confidence),
            ty_le={'Tai': _pct(ens.p_tai), 'Xiu': _pct(ens.p_xiu)},
            giai_thich=build_explanation(pattern, ens),
            pattern=pattern,
            id=self.tag,
            ensemble=ens,
        )
