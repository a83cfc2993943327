"""View-state endpoints: the server-held UI state of one user's session."""
from fastapi import APIRouter, Depends, Request, Response

from models import InputUpdate, ModeUpdate, SidebarUpdate
from auth import enforce_rate_limit, require_user_id
from session import get_session
from state import AppState
from export import CSV_FILENAME

router = APIRouter(prefix="/api/session", tags=["Session"])


@router.get("", response_model=AppState, summary="Current view state")
async def get_state(user_id: str = Depends(require_user_id)):
    return get_session(user_id).snapshot()


@router.post("/input", response_model=AppState)
async def update_input(body: InputUpdate, user_id: str = Depends(require_user_id)):
    return get_session(user_id).set_input(body.text)


@router.post("/mode", response_model=AppState)
async def update_mode(body: ModeUpdate, user_id: str = Depends(require_user_id)):
    return get_session(user_id).set_mode(body.mode, body.direction)


@router.post("/sidebar", response_model=AppState)
async def update_sidebar(body: SidebarUpdate, user_id: str = Depends(require_user_id)):
    return get_session(user_id).toggle_sidebar(body.open)


@router.post("/translate", response_model=AppState,
             summary="Translate the current input; the explanation arrives later in the state")
async def translate_current(request: Request, user_id: str = Depends(require_user_id)):
    enforce_rate_limit(request)
    session = get_session(user_id)
    await session.translate()
    return session.snapshot()


@router.post("/history", response_model=AppState, summary="Reload history from the newest record")
async def load_history(request: Request, user_id: str = Depends(require_user_id)):
    enforce_rate_limit(request)
    session = get_session(user_id)
    await session.load_history()
    return session.snapshot()


@router.post("/history/more", response_model=AppState, summary="Append the next history page")
async def load_more(request: Request, user_id: str = Depends(require_user_id)):
    enforce_rate_limit(request)
    session = get_session(user_id)
    await session.load_more()
    return session.snapshot()


@router.post("/restore/{record_id}", response_model=AppState)
async def restore(request: Request, record_id: str, user_id: str = Depends(require_user_id)):
    enforce_rate_limit(request)
    session = get_session(user_id)
    await session.restore(record_id)
    return session.snapshot()


@router.delete("/toasts/{toast_id}", response_model=AppState)
async def dismiss_toast(toast_id: str, user_id: str = Depends(require_user_id)):
    return get_session(user_id).dismiss(toast_id)


@router.get("/export", summary="Download the loaded history as CSV")
async def export_loaded_history(user_id: str = Depends(require_user_id)):
    headers = {"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'}
    return Response(content=get_session(user_id).export_csv(), media_type="text/csv", headers=headers)
