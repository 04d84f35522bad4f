from functools import lru_cache

from fastapi import Header, HTTPException

from taixiu.config import settings
from taixiu.db.base import engine
from taixiu.history import HistoryStore
from taixiu.services import TaiXiuPredictor
from taixiu.source import SessionSource


def require_api_key(api_key_header: str | None = Header(default=None, alias="x-api-key")):
    if settings.api_key and api_key_header != settings.api_key:
        raise HTTPException(status_code=401, detail="Unauthorized. Missing or invalid x-api-key.")


@lru_cache
def get_store() -> HistoryStore:
    return HistoryStore(engine)


@lru_cache
def get_predictor() -> TaiXiuPredictor:
    return TaiXiuPredictor(SessionSource(), get_store())
