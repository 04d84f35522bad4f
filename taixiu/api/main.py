from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taixiu.api.routes import router
from taixiu.config import settings
from taixiu.db.base import init_db
from taixiu.logger import setup_logging

APP_NAME = "tai-xiu-ai"
VERSION = "1.0.0"

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    init_db()
    yield

app = FastAPI(title="Tài/Xỉu AI tổng hợp", version=VERSION, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)

@app.get("/")
def home():
    return {"ok": True, "name": APP_NAME, "version": VERSION}
