"""View state for one user: an immutable AppState, pure reducers, and a Store.

Reducers take a state and return a new one; the Store applies them and
publishes each new state to its subscribers. Translation and explanation
completions carry the ``request_seq`` they were started with, and reducers
ignore them once a newer request (or a history restore) has superseded it.
"""
import time
import uuid
from typing import Callable, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from log import get_logger
from models import (
    DEFAULT_MODE, DEFAULT_DIRECTION,
    TranslationMode, TranslationDirection,
    Explanation, TranslationRecord, HistoryPage,
)

logger = get_logger("cheve.state")

TOAST_DURATION = 3.5  # seconds

ToastType = Literal["success", "error", "info"]


class Toast(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    message: str
    type: ToastType = "info"
    expires_at: float


class AppState(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    input_text: str = ""
    output_text: str = ""
    mode: TranslationMode = DEFAULT_MODE
    direction: TranslationDirection = DEFAULT_DIRECTION
    is_translating: bool = False
    is_explaining: bool = False
    explanation: Optional[Explanation] = None
    history: Tuple[TranslationRecord, ...] = ()
    history_loading: bool = False
    history_has_more: bool = False
    history_cursor: Optional[str] = None
    sidebar_open: bool = True
    toasts: Tuple[Toast, ...] = ()
    request_seq: int = 0


def make_toast(message: str, type: ToastType = "info", duration: float = TOAST_DURATION,
               now: Optional[float] = None) -> Toast:
    now = time.time() if now is None else now
    return Toast(id=uuid.uuid4().hex, message=message, type=type, expires_at=now + duration)


# --- Reducers ---

def set_input(state: AppState, text: str) -> AppState:
    return state.model_copy(update={"input_text": text})


def set_mode(state: AppState, mode: str, direction: str = DEFAULT_DIRECTION) -> AppState:
    return state.model_copy(update={"mode": mode, "direction": direction})


def toggle_sidebar(state: AppState, open: Optional[bool] = None) -> AppState:
    value = (not state.sidebar_open) if open is None else open
    return state.model_copy(update={"sidebar_open": value})


def start_translation(state: AppState) -> AppState:
    return state.model_copy(update={
        "request_seq": state.request_seq + 1,
        "is_translating": True,
        "is_explaining": False,
        "output_text": "",
        "explanation": None,
    })


def finish_translation(state: AppState, seq: int, output_text: str) -> AppState:
    if seq != state.request_seq:
        return state
    return state.model_copy(update={"output_text": output_text, "is_translating": False})


def fail_translation(state: AppState, seq: int) -> AppState:
    if seq != state.request_seq:
        return state
    return state.model_copy(update={"output_text": "", "is_translating": False})


def start_explanation(state: AppState, seq: int) -> AppState:
    if seq != state.request_seq:
        return state
    return state.model_copy(update={"is_explaining": True, "explanation": None})


def finish_explanation(state: AppState, seq: int, explanation: Optional[Explanation]) -> AppState:
    if seq != state.request_seq:
        return state
    return state.model_copy(update={"is_explaining": False, "explanation": explanation})


def start_history(state: AppState) -> AppState:
    return state.model_copy(update={"history_loading": True})


def history_loaded(state: AppState, page: HistoryPage, append: bool = False) -> AppState:
    records = tuple(page.translations)
    if append:
        records = state.history + records
    return state.model_copy(update={
        "history": records,
        "history_cursor": page.next_cursor,
        "history_has_more": page.has_more,
        "history_loading": False,
    })


def history_failed(state: AppState) -> AppState:
    return state.model_copy(update={"history_loading": False})


def prepend_history(state: AppState, record: TranslationRecord) -> AppState:
    return state.model_copy(update={"history": (record,) + state.history})


def restore_record(state: AppState, record: TranslationRecord) -> AppState:
    # bumping the sequence drops any translation still in flight
    return state.model_copy(update={
        "request_seq": state.request_seq + 1,
        "input_text": record.input_text,
        "output_text": record.output_text,
        "mode": record.mode,
        "is_translating": False,
        "is_explaining": False,
        "explanation": None,
    })


def add_toast(state: AppState, toast: Toast) -> AppState:
    return state.model_copy(update={"toasts": state.toasts + (toast,)})


def dismiss_toast(state: AppState, toast_id: str) -> AppState:
    remaining = tuple(t for t in state.toasts if t.id != toast_id)
    if len(remaining) == len(state.toasts):
        return state
    return state.model_copy(update={"toasts": remaining})


def prune_toasts(state: AppState, now: float) -> AppState:
    remaining = tuple(t for t in state.toasts if t.expires_at > now)
    if len(remaining) == len(state.toasts):
        return state
    return state.model_copy(update={"toasts": remaining})


# --- Store ---

Listener = Callable[[AppState], None]


class Store:
    """Holds the current AppState and publishes every change."""

    def __init__(self, state: AppState):
        self._state = state
        self._listeners: List[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, reducer: Callable[..., AppState], *args, **kwargs) -> AppState:
        new_state = reducer(self._state, *args, **kwargs)
        if new_state is self._state:
            return new_state
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("State listener failed", extra={"component": "state",
                                                                   "detail": reducer.__name__})
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
