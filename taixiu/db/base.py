from sqlmodel import SQLModel, create_engine
from sqlalchemy.engine import Engine
from taixiu.config import settings
import os

def make_engine(dsn: str = settings.db_dsn) -> Engine:
    # Tạo thư mục data khi dùng SQLite file
    if dsn.startswith("sqlite:///./data"):
        os.makedirs("data", exist_ok=True)
    return create_engine(dsn, echo=False)

engine = make_engine()

def init_db(bind: Engine = engine):
    # import models để SQLModel đăng ký bảng
    from taixiu.db import models  # noqa: F401
    SQLModel.metadata.create_all(bind)
