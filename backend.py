"""Cheve — dialect translation service (Paisa / Boricua / English)."""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from log import get_logger
from history import init_history_db, DB_PATH
from routes import router

logger = get_logger("cheve")

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_history_db()
    logger.info("History store ready", extra={"component": "history", "detail": str(DB_PATH)})
    yield


app = FastAPI(title="Cheve", lifespan=lifespan)
app.include_router(router)

if STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="static")
