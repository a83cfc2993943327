"""Translation and explanation endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request

from log import get_logger
from errors import CheveError, to_http_exception
from models import (
    MAX_INPUT_LEN,
    TranslateRequest, TranslateResponse, ExplainRequest, ExplainResponse,
)
from auth import enforce_rate_limit, require_user_id
from llm import translate_text, explain_translation
from history import save_translation

logger = get_logger("cheve.translate_routes")

router = APIRouter()


def _check_text(text: str, field: str = "Text"):
    if not text or not text.strip():
        raise HTTPException(400, f"{field} cannot be empty")
    if len(text) > MAX_INPUT_LEN:
        raise HTTPException(400, f"Input too long (max {MAX_INPUT_LEN} characters)")


@router.post("/api/translate", tags=["Translation"], response_model=TranslateResponse,
             summary="Translate text into the selected dialect and save it to history")
async def translate(
    request: Request,
    req: TranslateRequest,
    user_id: str = Depends(require_user_id),
):
    enforce_rate_limit(request)
    _check_text(req.text)

    source = req.text.strip()
    try:
        output = await translate_text(source, req.mode, req.direction)
        record = save_translation(user_id, source, output, req.mode)
    except CheveError as e:
        logger.warning("Translate request failed", extra={
            "endpoint": "/api/translate", "mode": req.mode, "direction": req.direction,
            "status_code": e.status_code, "detail": e.message,
        })
        raise to_http_exception(e)

    return TranslateResponse(translation=output, record=record)


@router.post("/api/explain", tags=["Translation"], response_model=ExplainResponse,
             summary="Cultural context and word notes for a finished translation")
async def explain(request: Request, req: ExplainRequest):
    """Best effort: any failure yields ``{"explanation": null}`` instead of an error."""
    enforce_rate_limit(request)
    _check_text(req.input_text, "Input text")
    _check_text(req.output_text, "Output text")

    try:
        explanation = await explain_translation(req.input_text, req.output_text, req.mode, req.direction)
    except CheveError as e:
        logger.warning("Explanation failed", extra={
            "endpoint": "/api/explain", "mode": req.mode, "direction": req.direction, "detail": e.message,
        })
        return ExplainResponse(explanation=None)
    return ExplainResponse(explanation=explanation)
