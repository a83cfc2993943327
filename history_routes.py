"""History browsing and CSV export endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from log import get_logger
from errors import UpstreamError, to_http_exception
from models import HistoryPage, TranslationRecord
from auth import enforce_rate_limit, require_user_id
from history import get_translations
from export import records_to_csv, CSV_FILENAME

logger = get_logger("cheve.history_routes")

router = APIRouter()


@router.get("/api/history", tags=["History"], response_model=HistoryPage,
            summary="One page of the user's translations, newest first")
async def get_history(
    request: Request,
    cursor: Optional[str] = None,
    user_id: str = Depends(require_user_id),
):
    enforce_rate_limit(request)
    try:
        return get_translations(user_id, cursor)
    except ValueError:
        raise HTTPException(400, "Invalid cursor")
    except UpstreamError as e:
        raise to_http_exception(e)


@router.post("/api/export-csv", tags=["History", "Export"], summary="Export translations as CSV")
async def export_csv(records: List[TranslationRecord]):
    headers = {"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'}
    logger.info("CSV export", extra={"endpoint": "/api/export-csv", "count": len(records)})
    return Response(content=records_to_csv(records), media_type="text/csv", headers=headers)
