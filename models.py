"""Pydantic schemas and constants for Cheve."""
from datetime import datetime
from typing import Optional, List, Literal

from pydantic import BaseModel, Field

# --- Constants ---
TranslationMode = Literal["en-paisa", "en-boricua", "paisa-boricua"]
TranslationDirection = Literal["forward", "reverse"]

TRANSLATION_MODES = ("en-paisa", "en-boricua", "paisa-boricua")
DIRECTIONS = ("forward", "reverse")
DEFAULT_MODE = "en-paisa"
DEFAULT_DIRECTION = "forward"

MODE_LABELS = {
    "en-paisa": {"forward": "English → Paisa", "reverse": "Paisa → English"},
    "en-boricua": {"forward": "English → Boricua", "reverse": "Boricua → English"},
    "paisa-boricua": {"forward": "Paisa → Boricua", "reverse": "Boricua → Paisa"},
}

DEFAULT_TONE = "colloquial"
MAX_INPUT_LEN = 2000

# --- Pydantic Models ---

class WordAnnotation(BaseModel):
    word: str
    meaning: str
    note: str = ""


class Explanation(BaseModel):
    context: str = ""
    tone: str = DEFAULT_TONE
    annotations: List[WordAnnotation] = Field(default_factory=list)


class TranslationRecord(BaseModel):
    id: str
    user_id: str
    input_text: str
    output_text: str
    mode: TranslationMode
    created_at: datetime


class HistoryPage(BaseModel):
    translations: List[TranslationRecord]
    next_cursor: Optional[str] = None
    has_more: bool = False


class TranslateRequest(BaseModel):
    text: str
    mode: TranslationMode = DEFAULT_MODE
    direction: TranslationDirection = DEFAULT_DIRECTION


class TranslateResponse(BaseModel):
    translation: str
    record: TranslationRecord


class ExplainRequest(BaseModel):
    input_text: str
    output_text: str
    mode: TranslationMode = DEFAULT_MODE
    direction: TranslationDirection = DEFAULT_DIRECTION


class ExplainResponse(BaseModel):
    explanation: Optional[Explanation] = None


class InputUpdate(BaseModel):
    text: str


class ModeUpdate(BaseModel):
    mode: TranslationMode
    direction: TranslationDirection = DEFAULT_DIRECTION


class SidebarUpdate(BaseModel):
    open: Optional[bool] = None  # None toggles
