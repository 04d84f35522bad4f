import json
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from taixiu.db.models import HistoryState, STATE_ID
from taixiu.exceptions import PersistenceReadFailure, PersistenceWriteFailure


@dataclass
class StoredState:
    pattern: list = field(default_factory=list)
    last_updated: int = 0
    last_session: Optional[int] = None


def read_state(session: Session) -> StoredState:
    """Đọc bản ghi state; raise PersistenceReadFailure nếu thiếu hoặc hỏng."""
    try:
        row = session.get(HistoryState, STATE_ID)
    except SQLAlchemyError as e:
        raise PersistenceReadFailure(f"cannot read history_state: {e}") from e
    if row is None:
        raise PersistenceReadFailure("history_state row missing")
    try:
        pattern = json.loads(row.pattern)
    except (TypeError, ValueError) as e:
        raise PersistenceReadFailure(f"history pattern is not valid JSON: {e}") from e
    if not isinstance(pattern, list):
        raise PersistenceReadFailure("history pattern is not a list")
    return StoredState(pattern=pattern, last_updated=row.last_updated or 0,
                       last_session=row.last_session)


def write_state(session: Session, state: StoredState) -> None:
    try:
        row = session.get(HistoryState, STATE_ID) or HistoryState(id=STATE_ID)
        row.pattern = json.dumps(list(state.pattern))
        row.last_updated = state.last_updated
        row.last_session = state.last_session
        session.add(row)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceWriteFailure(f"cannot write history_state: {e}") from e
