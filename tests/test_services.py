import pytest
from sqlmodel import Session

from taixiu.db.crud import read_state
from taixiu.exceptions import MalformedSourcePayload, SourceUnavailable
from taixiu.services import TaiXiuPredictor, clean_fields, latest_session, recent_totals

ITEMS = [
    {"id": 1001, "resultTruyenThong": "XIU", "dices": [1, 2, 3], "point": 6},
    {"id": 1003, "resultTruyenThong": "TAI", "dices": [6, 5, 4], "point": 15},
    {"id": 1002, "resultTruyenThong": "TAI", "dices": [4, 4, 4], "point": 12},
]


def test_latest_session_by_max_id():
    assert latest_session(ITEMS)["id"] == 1003
    with pytest.raises(MalformedSourcePayload):
        latest_session([{"id": None}, {"resultTruyenThong": "TAI"}])


def test_recent_totals_keeps_numbers_only():
    items = [{"point": 11}, {"point": None}, {"point": True}, {"point": "9"}, {"point": 4.5}]
    assert recent_totals(items) == [11, 4.5]
    assert recent_totals([{"point": i} for i in range(30)]) == list(range(10, 30))
    assert recent_totals([]) == []


def test_predict_report(store, fake_source):
    predictor = TaiXiuPredictor(fake_source(ITEMS), store, tag="tag-1")
    report = predictor.predict()
    assert report.session == 1003 and report.next_session == 1004
    assert report.dice == [6, 5, 4] and report.total == 15 and report.result == "TAI"
    assert report.pattern == ['T']
    assert report.du_doan in ("Tài", "Xỉu")
    assert report.do_tin_cay.endswith('%') and report.ty_le['Tai'].endswith('%')
    tai = float(report.ty_le['Tai'][:-1]); xiu = float(report.ty_le['Xiu'][:-1])
    assert tai + xiu == pytest.approx(100.0, abs=0.011)
    assert report.du_doan == ("Tài" if report.ensemble.p_tai >= report.ensemble.p_xiu else "Xỉu")
    assert "[T]" in report.giai_thich
    payload = report.to_payload()
    assert set(payload) == {'session', 'dice', 'total', 'result', 'next_session', 'du_doan',
                            'do_tin_cay', 'giai_thich', 'pattern', 'ty_le', 'id'}
    assert payload['id'] == "tag-1"


def test_predict_persists_history(engine, store, fake_source):
    TaiXiuPredictor(fake_source(ITEMS), store).predict()
    with Session(engine) as s:
        state = read_state(s)
    assert state.pattern == ['T'] and state.last_session == 1003


def test_repeated_poll_of_same_session_appends_once(store, fake_source):
    predictor = TaiXiuPredictor(fake_source(ITEMS), store)
    predictor.predict()
    assert predictor.predict().pattern == ['T']
    predictor.source.items = ITEMS + [{"id": 1004, "resultTruyenThong": "Xỉu", "point": 5}]
    assert predictor.predict().pattern == ['T', 'X']


def test_unrecognized_result_leaves_history(store, fake_source):
    store.record('X', session_id=1)
    items = [{"id": 2000, "resultTruyenThong": "???", "point": 10}]
    report = TaiXiuPredictor(fake_source(items), store).predict()
    assert report.pattern == ['X'] and report.result == "???"
    assert store.last_session == 1


def test_missing_result_label(store, fake_source):
    report = TaiXiuPredictor(fake_source([{"id": 5}]), store).predict()
    assert report.result is None and report.dice == [] and report.total is None
    assert report.pattern == []


@pytest.mark.parametrize("error", [
    MalformedSourcePayload("Nguồn không trả về list hợp lệ."),
    SourceUnavailable("timeout", timeout=True),
])
def test_source_failure_leaves_history_untouched(store, fake_source, error):
    store.record('T', session_id=9)
    predictor = TaiXiuPredictor(fake_source(error=error), store)
    with pytest.raises(type(error)):
        predictor.predict()
    assert store.snapshot() == ('T',)


def test_empty_event_list_fails(store, fake_source):
    with pytest.raises(MalformedSourcePayload):
        TaiXiuPredictor(fake_source([]), store).predict()
    assert store.snapshot() == ()


def test_non_integer_ids_are_not_sessions():
    items = [{"id": 1003.7, "resultTruyenThong": "TAI"}, {"id": 1002, "resultTruyenThong": "XIU"}]
    assert latest_session(items)["id"] == 1002
    with pytest.raises(MalformedSourcePayload):
        latest_session([{"id": 5.5}, {"id": True}])


def test_clean_fields():
    assert clean_fields({"id": 1, "dices": [1, 2, 3], "point": 6, "resultTruyenThong": "XIU"}) == ([1, 2, 3], 6, "XIU")
    assert clean_fields({"id": 1, "dices": None, "resultTruyenThong": ""}) == ([], None, None)
    for bad in ({"dices": "1,2,3"}, {"dices": [1, True]}, {"point": [6]}, {"resultTruyenThong": {"x": 1}}):
        with pytest.raises(MalformedSourcePayload):
            clean_fields({"id": 1, **bad})


def test_wrong_typed_dice_fail_before_history_changes(store, fake_source):
    items = [{"id": 42, "resultTruyenThong": "TAI", "dices": "3,4,5", "point": 12}]
    with pytest.raises(MalformedSourcePayload):
        TaiXiuPredictor(fake_source(items), store).predict()
    assert store.snapshot() == ()
