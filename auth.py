"""Anonymous user identifiers and per-client rate limiting."""
import re as _re
import time
import uuid
from typing import Optional
from collections import defaultdict

from fastapi import Header, HTTPException, Request

# --- Rate Limiting ---
RATE_LIMIT_REQUESTS = 30
RATE_LIMIT_WINDOW = 60
_rate_buckets: dict = defaultdict(list)
_rate_check_counter = 0


def rate_limit_check(key: str) -> bool:
    now = time.time()
    cutoff = now - RATE_LIMIT_WINDOW
    _rate_buckets[key] = [t for t in _rate_buckets[key] if t > cutoff]
    if len(_rate_buckets[key]) >= RATE_LIMIT_REQUESTS:
        return False
    _rate_buckets[key].append(now)
    return True


def rate_limit_cleanup():
    global _rate_check_counter
    _rate_check_counter += 1
    if _rate_check_counter % 100 == 0:
        now = time.time()
        cutoff = now - RATE_LIMIT_WINDOW
        stale = [k for k, ts in _rate_buckets.items() if not ts or ts[-1] < cutoff]
        for k in stale:
            del _rate_buckets[k]


def get_rate_limit_key(request: Request) -> str:
    user_id = request.headers.get("x-user-id")
    if user_id:
        return f"user:{user_id}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


def enforce_rate_limit(request: Request):
    rate_limit_cleanup()
    if not rate_limit_check(get_rate_limit_key(request)):
        raise HTTPException(429, "Too many requests. Please wait a minute.")


# --- User identity ---
# Not a credential: clients generate (or request) a random id once and keep it.
USER_ID_PATTERN = _re.compile(r"^[A-Za-z0-9_-]{8,64}$")


def new_user_id() -> str:
    return str(uuid.uuid4())


async def require_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """FastAPI dependency that validates the X-User-Id header."""
    if not x_user_id or not USER_ID_PATTERN.match(x_user_id):
        raise HTTPException(400, "Missing or invalid X-User-Id header")
    return x_user_id
