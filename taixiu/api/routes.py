from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from taixiu.api.deps import get_predictor, get_store, require_api_key
from taixiu.api.schemas import ErrorOut, HistoryOut, PredictOut
from taixiu.exceptions import SourceError
from taixiu.history import HistoryStore
from taixiu.logger import get_logger
from taixiu.services import TaiXiuPredictor

logger = get_logger(__name__)

router = APIRouter(prefix="/api/taixiu", dependencies=[Depends(require_api_key)])


@router.get('/predict', response_model=PredictOut, responses={500: {"model": ErrorOut}})
def predict(predictor: TaiXiuPredictor = Depends(get_predictor)):
    try:
        report = predictor.predict()
        out = PredictOut(**report.to_payload())
    except SourceError as e:
        logger.error("Lỗi /api/taixiu/predict: %s", e)
        return JSONResponse({"error": str(e) or "Internal Server Error"}, status_code=500)
    except Exception:
        logger.exception("Unexpected failure in /api/taixiu/predict")
        return JSONResponse({"error": "Internal Server Error"}, status_code=500)
    return out


@router.get('/history', response_model=HistoryOut)
def history(store: HistoryStore = Depends(get_store)):
    pattern = list(store.snapshot())
    return {'pattern': pattern, 'last_updated': store.last_updated, 'last_session': store.last_session}
