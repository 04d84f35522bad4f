# Lịch sử kết quả gần nhất (tối đa 20), lưu qua SQLModel.
# record() là đường đọc-sửa-ghi duy nhất và chạy dưới lock của store.
# Lỗi lưu trữ không lan ra ngoài: đọc hỏng -> lịch sử rỗng, ghi hỏng -> giữ bản trong bộ nhớ.

from __future__ import annotations

import threading
import time
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from taixiu.config import settings
from taixiu.core.labels import Label, is_valid_outcome
from taixiu.db.crud import StoredState, read_state, write_state
from taixiu.exceptions import PersistenceReadFailure, PersistenceWriteFailure
from taixiu.logger import get_logger

logger = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryStore:
    def __init__(self, engine: Engine, capacity: int = settings.history_capacity):
        self.engine = engine
        self.capacity = capacity
        self._lock = threading.Lock()
        self._state = StoredState()
        self._loaded = False

    # ---------------- in-memory ----------------
    @property
    def pattern(self) -> list[Label]:
        return list(self._state.pattern)

    @property
    def last_updated(self) -> int:
        return self._state.last_updated

    @property
    def last_session(self) -> Optional[int]:
        return self._state.last_session

    def snapshot(self) -> tuple[Label, ...]:
        with self._lock:
            self._ensure_loaded()
            return tuple(self._state.pattern)

    def append(self, outcome: Optional[Label]) -> bool:
        # Bỏ qua nhãn không hợp lệ; chỉ giữ `capacity` phần tử cuối. Không ghi DB.
        if not is_valid_outcome(outcome):
            return False
        pattern = self._state.pattern + [outcome]
        self._state.pattern = pattern[-self.capacity:]
        self._state.last_updated = _now_ms()
        return True

    # ---------------- persistence ----------------
    def load(self) -> list[Label]:
        try:
            with Session(self.engine) as session:
                stored = read_state(session)
        except PersistenceReadFailure as e:
            logger.warning("History state unavailable, starting empty: %s", e)
            stored = StoredState()
        stored.pattern = [y for y in stored.pattern if is_valid_outcome(y)][-self.capacity:]
        self._state = stored
        self._loaded = True
        return self.pattern

    def save(self) -> bool:
        try:
            with Session(self.engine) as session:
                write_state(session, self._state)
        except PersistenceWriteFailure as e:
            logger.error("History state not persisted: %s", e)
            return False
        return True

    def _ensure_loaded(self):
        if not self._loaded:
            self.load()

    def record(self, outcome: Optional[Label], session_id: Optional[int] = None) -> tuple[Label, ...]:
        """Thêm kết quả của phiên `session_id` rồi ghi DB (nguyên tử).

        Phiên đã ghi rồi thì không thêm lần nữa. Trả về bản chụp lịch sử.
        """
        with self._lock:
            self._ensure_loaded()
            if session_id is not None and session_id == self._state.last_session:
                logger.debug("Session %s already recorded, skipping", session_id)
                return tuple(self._state.pattern)
            if self.append(outcome):
                if session_id is not None:
                    self._state.last_session = session_id
                self.save()
            return tuple(self._state.pattern)
