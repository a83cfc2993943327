"""Per-user translator session: drives the translate → save → explain flow
against the view state and keeps an LRU of live sessions."""
import time
import asyncio
from collections import OrderedDict
from typing import Optional, Set

import httpx

from log import get_logger
from errors import CheveError, UpstreamError
from models import TranslationRecord, HistoryPage, DEFAULT_DIRECTION, MAX_INPUT_LEN
from llm import translate_text, explain_translation
from history import save_translation, get_translations, get_translation
from export import records_to_csv
from state import (
    AppState, Store, ToastType, TOAST_DURATION, make_toast,
    set_input, set_mode, toggle_sidebar,
    start_translation, finish_translation, fail_translation,
    start_explanation, finish_explanation,
    start_history, history_loaded, history_failed, prepend_history,
    restore_record, add_toast, dismiss_toast, prune_toasts,
)

logger = get_logger("cheve.session")

RESTORE_DELAY = 0.3  # seconds
SESSION_MAX = 500


class TranslatorSession:
    def __init__(self, user_id: str, client: Optional[httpx.AsyncClient] = None):
        self.user_id = user_id
        self.store = Store(AppState(user_id=user_id))
        self._client = client
        self._tasks: Set[asyncio.Task] = set()

    # --- view helpers ---

    def snapshot(self) -> AppState:
        return self.store.dispatch(prune_toasts, time.time())

    def notify(self, message: str, type: ToastType = "info", duration: float = TOAST_DURATION):
        self.store.dispatch(add_toast, make_toast(message, type, duration))

    def dismiss(self, toast_id: str) -> AppState:
        return self.store.dispatch(dismiss_toast, toast_id)

    def set_input(self, text: str) -> AppState:
        return self.store.dispatch(set_input, text)

    def set_mode(self, mode: str, direction: str = DEFAULT_DIRECTION) -> AppState:
        return self.store.dispatch(set_mode, mode, direction)

    def toggle_sidebar(self, open: Optional[bool] = None) -> AppState:
        return self.store.dispatch(toggle_sidebar, open)

    # --- translation ---

    async def translate(self, text: Optional[str] = None, explain: bool = True) -> Optional[TranslationRecord]:
        """Translate the current input, save it, and start the explanation.

        Returns the saved record, or None when the translation failed or was
        superseded before it finished.
        """
        if text is not None:
            self.set_input(text)
        state = self.store.state
        source = state.input_text.strip()
        if not source:
            self.notify("Enter some text to translate", "info")
            return None
        if len(source) > MAX_INPUT_LEN:
            self.notify(f"Input too long (max {MAX_INPUT_LEN} characters)", "error")
            return None

        mode, direction = state.mode, state.direction
        seq = self.store.dispatch(start_translation).request_seq
        try:
            output = await translate_text(source, mode, direction, client=self._client)
        except CheveError as e:
            logger.warning("Translation failed", extra={
                "component": "session", "mode": mode, "direction": direction, "detail": e.message,
            })
            if seq == self.store.state.request_seq:
                self.notify(f"Translation failed: {e.message}", "error")
            self.store.dispatch(fail_translation, seq)
            return None

        record = None
        try:
            record = save_translation(self.user_id, source, output, mode)
        except UpstreamError as e:
            self.notify(f"Could not save to history: {e.message}", "error")
        if record is not None:
            self.store.dispatch(prepend_history, record)

        if seq != self.store.state.request_seq:
            logger.info("Discarding stale translation", extra={"component": "session", "count": seq})
            return None

        self.store.dispatch(finish_translation, seq, output)
        if explain:
            task = asyncio.create_task(self.explain(seq, source, output, mode, direction))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return record

    async def explain(self, seq: int, input_text: str, output_text: str, mode: str, direction: str):
        """Fetch the cultural context panel. Failures only log."""
        self.store.dispatch(start_explanation, seq)
        explanation = None
        try:
            explanation = await explain_translation(input_text, output_text, mode, direction,
                                                    client=self._client)
        except CheveError as e:
            logger.warning("Explanation failed", extra={
                "component": "session", "mode": mode, "direction": direction, "detail": e.message,
            })
        self.store.dispatch(finish_explanation, seq, explanation)
        return explanation

    async def wait_idle(self):
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    # --- history ---

    async def load_history(self) -> Optional[HistoryPage]:
        return await self._load_page(None, append=False)

    async def load_more(self) -> Optional[HistoryPage]:
        state = self.store.state
        if not state.history_has_more or state.history_loading:
            return None
        return await self._load_page(state.history_cursor, append=True)

    async def _load_page(self, cursor: Optional[str], append: bool) -> Optional[HistoryPage]:
        self.store.dispatch(start_history)
        try:
            page = get_translations(self.user_id, cursor)
        except (UpstreamError, ValueError) as e:
            logger.warning("History load failed", extra={"component": "session", "detail": str(e)})
            self.store.dispatch(history_failed)
            self.notify("Could not load history", "error")
            return None
        self.store.dispatch(history_loaded, page, append)
        return page

    async def restore(self, record_id: str) -> Optional[TranslationRecord]:
        record = next((r for r in self.store.state.history if r.id == record_id), None)
        if record is None:
            try:
                record = get_translation(record_id)
            except UpstreamError as e:
                logger.warning("Restore lookup failed", extra={"component": "session", "detail": e.message})
                self.notify("Could not load translation", "error")
                return None
        if record is None or record.user_id != self.user_id:
            self.notify("Translation not found", "error")
            return None
        await asyncio.sleep(RESTORE_DELAY)
        self.store.dispatch(restore_record, record)
        self.notify("Restored from history", "success")
        return record

    def export_csv(self) -> str:
        return records_to_csv(self.store.state.history)


# --- Session registry ---
_sessions: "OrderedDict[str, TranslatorSession]" = OrderedDict()


def get_session(user_id: str) -> TranslatorSession:
    session = _sessions.get(user_id)
    if session is None:
        session = TranslatorSession(user_id)
        _sessions[user_id] = session
        if len(_sessions) > SESSION_MAX:
            _sessions.popitem(last=False)
    else:
        _sessions.move_to_end(user_id)
    return session


def clear_sessions():
    _sessions.clear()
