"""Gemini interaction: request envelope, error mapping, translate/explain calls."""
import os
import time
import asyncio
from typing import Optional

import httpx

from log import get_logger
from errors import ConfigurationError, UpstreamError, EmptyResponseError
from models import Explanation
from prompts import build_translation_prompt, build_explanation_prompt
from explain import parse_explanation

logger = get_logger("cheve.llm")

# --- Config ---
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-3-flash-preview")
GEMINI_URL = os.environ.get("GEMINI_URL", "https://generativelanguage.googleapis.com/v1beta")
TEMPERATURE = 0.2
TRANSLATE_MAX_TOKENS = 1024
EXPLAIN_MAX_TOKENS = 400
EXPLANATION_DELAY = 2.0  # seconds


def gemini_endpoint() -> str:
    return f"{GEMINI_URL}/models/{GEMINI_MODEL}:generateContent"


def build_request_body(prompt: str, max_tokens: int) -> dict:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {"temperature": TEMPERATURE, "maxOutputTokens": max_tokens},
    }


def _upstream_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return f"Gemini API error: {resp.status_code}"


def extract_candidate_text(data) -> Optional[str]:
    """Text of the first part of the first candidate, or None."""
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


async def call_gemini(prompt: str, max_tokens: int = TRANSLATE_MAX_TOKENS,
                      client: Optional[httpx.AsyncClient] = None) -> str:
    """Send one generateContent request and return the first candidate's text.

    Single round trip: no retry, no streaming, no timeout. Pass ``client``
    to reuse a connection pool (or a mock transport in tests).
    """
    if not GEMINI_API_KEY:
        raise ConfigurationError("GEMINI_API_KEY is not set in environment variables.")

    started = time.time()
    body = build_request_body(prompt, max_tokens)
    params = {"key": GEMINI_API_KEY}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=None) as own_client:
                resp = await own_client.post(gemini_endpoint(), params=params, json=body)
        else:
            resp = await client.post(gemini_endpoint(), params=params, json=body)
    except httpx.HTTPError as e:
        logger.error("Gemini request failed", extra={"component": "gemini", "detail": str(e)})
        raise UpstreamError(f"Gemini request failed: {e}", status=0) from e

    duration_ms = int((time.time() - started) * 1000)
    if not resp.is_success:
        message = _upstream_message(resp)
        logger.warning("Gemini returned an error", extra={
            "component": "gemini", "status_code": resp.status_code,
            "duration_ms": duration_ms, "detail": message,
        })
        raise UpstreamError(message, status=resp.status_code)

    try:
        data = resp.json()
    except ValueError:
        data = None
    text = extract_candidate_text(data)
    if not text or not str(text).strip():
        raise EmptyResponseError("Gemini returned an empty response.")

    logger.info("Gemini call finished", extra={
        "component": "gemini", "status_code": resp.status_code, "duration_ms": duration_ms,
    })
    return str(text).strip()


async def translate_text(text: str, mode: str, direction: str = "forward",
                         client: Optional[httpx.AsyncClient] = None) -> str:
    prompt = build_translation_prompt(text, mode, direction)
    return await call_gemini(prompt, TRANSLATE_MAX_TOKENS, client=client)


async def explain_translation(input_text: str, output_text: str, mode: str,
                              direction: str = "forward",
                              client: Optional[httpx.AsyncClient] = None) -> Explanation:
    """Ask for the CONTEXT/WORD1/WORD2 breakdown of a finished translation."""
    await asyncio.sleep(EXPLANATION_DELAY)
    raw = await call_gemini(
        build_explanation_prompt(input_text, output_text, mode, direction),
        EXPLAIN_MAX_TOKENS,
        client=client,
    )
    logger.debug("Explanation raw reply", extra={"component": "gemini", "detail": raw})
    return parse_explanation(raw)


def gemini_configured() -> bool:
    return bool(GEMINI_API_KEY)
