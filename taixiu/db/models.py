from sqlmodel import SQLModel, Field

STATE_ID = 1


class HistoryState(SQLModel, table=True):
    __tablename__ = "history_state"

    id: int = Field(default=STATE_ID, primary_key=True)
    pattern: str = "[]"  # JSON: ["T","X",...]
    last_updated: int = 0  # epoch ms
    last_session: int | None = None
