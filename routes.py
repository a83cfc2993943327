"""API route handlers for Cheve."""
from fastapi import APIRouter

from log import get_logger
from models import TRANSLATION_MODES, DIRECTIONS, DEFAULT_MODE, DEFAULT_DIRECTION, MODE_LABELS
from auth import new_user_id
from llm import GEMINI_MODEL, gemini_configured
from history import PAGE_SIZE

from translate_routes import router as translate_router
from history_routes import router as history_router
from session_routes import router as session_router

logger = get_logger("cheve.routes")

router = APIRouter()
router.include_router(translate_router)
router.include_router(history_router)
router.include_router(session_router)


@router.get("/api/health", tags=["System"], summary="Health check")
async def health_check():
    configured = gemini_configured()
    return {
        "status": "ok" if configured else "degraded",
        "gemini": {"configured": configured, "model": GEMINI_MODEL},
        "history": {"page_size": PAGE_SIZE},
    }


@router.get("/api/modes", tags=["Reference"], summary="List dialect modes and directions")
async def list_modes():
    return {
        "modes": list(TRANSLATION_MODES),
        "directions": list(DIRECTIONS),
        "default_mode": DEFAULT_MODE,
        "default_direction": DEFAULT_DIRECTION,
        "labels": MODE_LABELS,
    }


@router.get("/api/user-id", tags=["System"], summary="Issue a new anonymous user id")
async def issue_user_id():
    user_id = new_user_id()
    logger.info("Issued user id", extra={"component": "auth"})
    return {"user_id": user_id}
