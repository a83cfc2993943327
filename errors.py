"""Error types shared by the Gemini client and the history store.

Routes turn these into HTTPException responses using ``status_code``.
"""
from typing import Optional

from fastapi import HTTPException


class CheveError(Exception):
    """Base class for failures the API reports to the client."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(CheveError):
    """No Gemini API key is configured. Raised at call time, not at startup."""

    status_code = 503


class UpstreamError(CheveError):
    """Gemini or the document store answered with a failure.

    ``status`` is the upstream HTTP status, or 0 when no response arrived.
    """

    status_code = 502

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class EmptyResponseError(CheveError):
    """The model replied successfully but produced no candidate text."""

    status_code = 502


def to_http_exception(e: CheveError) -> HTTPException:
    return HTTPException(e.status_code, e.message)
