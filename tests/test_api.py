import pytest
from fastapi.testclient import TestClient

from taixiu.api.deps import get_predictor, get_store
from taixiu.api.main import app
from taixiu.config import settings
from taixiu.exceptions import MalformedSourcePayload, SourceUnavailable
from taixiu.services import TaiXiuPredictor

ITEMS = [{"id": 42, "resultTruyenThong": "TAI", "dices": [3, 4, 5], "point": 12}]


@pytest.fixture
def client(store, fake_source):
    source = fake_source(ITEMS)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_predictor] = lambda: TaiXiuPredictor(source, store, tag="test")
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_home(client):
    r = client.get('/')
    assert r.status_code == 200
    assert r.json() == {"ok": True, "name": "tai-xiu-ai", "version": "1.0.0"}


def test_predict(client):
    r = client.get('/api/taixiu/predict')
    assert r.status_code == 200
    d = r.json()
    assert d['session'] == 42 and d['next_session'] == 43
    assert d['dice'] == [3, 4, 5] and d['total'] == 12 and d['result'] == "TAI"
    assert d['pattern'] == ['T'] and d['id'] == "test"
    assert set(d['ty_le']) == {'Tai', 'Xiu'}


def test_history_view(client):
    client.get('/api/taixiu/predict')
    d = client.get('/api/taixiu/history').json()
    assert d['pattern'] == ['T'] and d['last_session'] == 42 and d['last_updated'] > 0


@pytest.mark.parametrize("error", [
    MalformedSourcePayload("Nguồn không trả về list hợp lệ."),
    SourceUnavailable("Nguồn dữ liệu không phản hồi (timeout).", timeout=True),
])
def test_source_failure_is_500(store, fake_source, error):
    app.dependency_overrides[get_predictor] = lambda: TaiXiuPredictor(fake_source(error=error), store)
    try:
        r = TestClient(app).get('/api/taixiu/predict')
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {"error": str(error)}
    assert store.snapshot() == ()


def test_api_key_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "api_key", "s3cret")
    assert client.get('/api/taixiu/predict').status_code == 401
    assert client.get('/api/taixiu/predict', headers={"x-api-key": "wrong"}).status_code == 401
    assert client.get('/api/taixiu/predict', headers={"X-API-Key": "s3cret"}).status_code == 200
    assert client.get('/').status_code == 200


@pytest.mark.parametrize("bad", [
    {"dices": "3,4,5"},
    {"dices": [3, "4", 5]},
    {"point": "12"},
    {"resultTruyenThong": 1},
])
def test_wrong_typed_fields_are_json_500_and_history_untouched(store, fake_source, bad):
    items = [{"id": 42, "resultTruyenThong": "TAI", "dices": [3, 4, 5], "point": 12, **bad}]
    app.dependency_overrides[get_predictor] = lambda: TaiXiuPredictor(fake_source(items), store)
    try:
        r = TestClient(app).get('/api/taixiu/predict')
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert "error" in r.json()
    assert store.snapshot() == ()


def test_cors_allows_browser_clients(client):
    r = client.get('/api/taixiu/predict', headers={"Origin": "http://dashboard.local"})
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"
