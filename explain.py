"""Best-effort parsing of the model's CONTEXT / WORD1 / WORD2 reply.

The model is asked for three labeled lines but nothing guarantees it
complies, so every step has a fallback and ``parse_explanation`` never
raises. Line selection is a pair of ordered strategy tuples; each strategy
looks at one line and returns it (or None), and the first strategy that
yields enough lines wins.
"""
import re as _re
from typing import Callable, List, Optional, Sequence, Tuple

from models import DEFAULT_TONE, Explanation, WordAnnotation

MAX_ANNOTATIONS = 2

_MARKDOWN_CHARS = _re.compile(r"[*_`#]")
_CONTEXT_LABEL = _re.compile(r"^CONTEXT\s*:\s*", _re.IGNORECASE)
_WORD_LABEL = _re.compile(r"^WORD\d\s*:", _re.IGNORECASE)
_LINE_PREFIX = _re.compile(r"^(?:WORD\d\s*:|\d+\.|[-*•])\s*", _re.IGNORECASE)
_TONE_GROUP = _re.compile(r"\(([^)]+)\)\s*$")
_DASH = _re.compile(r"[-–—]")
# hyphen needs whitespace on both sides so "street-smart" stays one word;
# en/em dashes split with or without spaces
_SEPARATOR = _re.compile(r"\s+-\s+|\s*[–—]\s*")

LineStrategy = Callable[[str], Optional[str]]


def clean_lines(raw: Optional[str]) -> List[str]:
    """Drop markdown marker characters and return trimmed non-empty lines."""
    text = _MARKDOWN_CHARS.sub("", raw or "")
    return [line.strip() for line in text.splitlines() if line.strip()]


# --- line strategies ---

def labeled_context_line(line: str) -> Optional[str]:
    return line if _CONTEXT_LABEL.match(line) else None


def any_line(line: str) -> Optional[str]:
    return line


def labeled_word_line(line: str) -> Optional[str]:
    return line if _WORD_LABEL.match(line) else None


def dashed_line(line: str) -> Optional[str]:
    """Unlabeled line that still looks like ``word - meaning - note``."""
    if _CONTEXT_LABEL.match(line):
        return None
    return line if len(_DASH.findall(line)) >= 2 else None


CONTEXT_STRATEGIES: Tuple[LineStrategy, ...] = (labeled_context_line, any_line)
WORD_STRATEGIES: Tuple[LineStrategy, ...] = (labeled_word_line, dashed_line)


def find_context_line(lines: Sequence[str]) -> Tuple[Optional[int], str]:
    """Return (index, line) of the context line, or (None, "") when there are no lines."""
    for strategy in CONTEXT_STRATEGIES:
        for idx, line in enumerate(lines):
            if strategy(line) is not None:
                return idx, line
    return None, ""


def split_tone(context_line: str) -> Tuple[str, str]:
    """Split ``CONTEXT: body (tone words)`` into (context, tone)."""
    body = _CONTEXT_LABEL.sub("", context_line, count=1).strip()
    match = _TONE_GROUP.search(body)
    if not match or not match.group(1).strip():
        return body, DEFAULT_TONE
    return body[:match.start()].strip(), match.group(1).strip()


def select_word_lines(lines: Sequence[str], context_idx: Optional[int]) -> List[str]:
    """Every labeled WORDn line, then fallback lines until two are found."""
    primary, *fallbacks = WORD_STRATEGIES
    selected: List[int] = [idx for idx, line in enumerate(lines) if primary(line) is not None]
    for strategy in fallbacks:
        for idx, line in enumerate(lines):
            if len(selected) >= MAX_ANNOTATIONS:
                break
            if idx in selected or idx == context_idx:
                continue
            if strategy(line) is not None:
                selected.append(idx)
    return [lines[idx] for idx in selected]


def parse_word_line(line: str) -> Optional[WordAnnotation]:
    body = _LINE_PREFIX.sub("", line, count=1).strip()
    parts = [p.strip() for p in _SEPARATOR.split(body)]
    parts = [p for p in parts if p]
    if len(parts) < 2:
        return None
    word, meaning, *rest = parts
    note = " - ".join(rest).strip()
    return WordAnnotation(word=word, meaning=meaning, note=note or meaning)


def parse_explanation(raw: Optional[str]) -> Explanation:
    lines = clean_lines(raw)
    context_idx, context_line = find_context_line(lines)
    context, tone = split_tone(context_line)

    annotations = []
    for line in select_word_lines(lines, context_idx):
        annotation = parse_word_line(line)
        if annotation is None or not annotation.word or not annotation.meaning:
            continue
        annotations.append(annotation)

    return Explanation(context=context, tone=tone, annotations=annotations[:MAX_ANNOTATIONS])
