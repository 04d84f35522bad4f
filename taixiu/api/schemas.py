from pydantic import BaseModel
from typing import Optional, Union


class RatioOut(BaseModel):
    Tai: str
    Xiu: str


class PredictOut(BaseModel):
    session: int
    dice: list
    total: Optional[Union[int, float]] = None
    result: Optional[str] = None
    next_session: int
    du_doan: str
    do_tin_cay: str
    giai_thich: str
    pattern: list[str]
    ty_le: RatioOut
    id: str


class HistoryOut(BaseModel):
    pattern: list[str]
    last_updated: int
    last_session: Optional[int] = None


class ErrorOut(BaseModel):
    error: str
