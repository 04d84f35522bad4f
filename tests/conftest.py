import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from taixiu.db.base import init_db
from taixiu.exceptions import MalformedSourcePayload
from taixiu.history import HistoryStore


def memory_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def engine():
    eng = memory_engine()
    init_db(eng)
    return eng


@pytest.fixture
def store(engine):
    return HistoryStore(engine, capacity=20)


class FakeSource:
    def __init__(self, items=None, error=None):
        self.items = items
        self.error = error
        self.calls = 0

    def fetch_sessions(self):
        self.calls += 1
        if self.error:
            raise self.error
        if not self.items:
            raise MalformedSourcePayload("Nguồn không trả về list hợp lệ.")
        return self.items


@pytest.fixture
def fake_source():
    return FakeSource


@pytest.fixture
def bare_engine():
    return memory_engine()
