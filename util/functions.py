# util/functions.py
import re
from typing import Optional

_WS = re.compile(r"\s+")
_DOUBLE_QUOTES = re.compile("[\u201c\u201d\u201e\u201f]")
_SINGLE_QUOTES = re.compile("[\u2018\u2019\u201b]")
_NOT_SEARCHABLE = re.compile(r"[^a-z0-9\s'\"\-]")


def normalize_for_search(s: Optional[str]) -> str:
    """
    Canonical form used for every text match:
    - lowercase, soft hyphens dropped, curly quotes made straight
    - anything outside [a-z0-9 '"-] becomes a space
    - whitespace collapsed and trimmed
    Idempotent: normalize_for_search(normalize_for_search(s)) == normalize_for_search(s).
    """
    if not s:
        return ""
    out = str(s).lower().replace("\u00ad", "")
    out = _WS.sub(" ", out)
    out = _DOUBLE_QUOTES.sub('"', out)
    out = _SINGLE_QUOTES.sub("'", out)
    out = _NOT_SEARCHABLE.sub(" ", out)
    return _WS.sub(" ", out).strip()


def collapse_whitespace(text: Optional[str]) -> str:
    return _WS.sub(" ", text or "").strip()


def clip_chars(text: Optional[str], max_chars: int = 400) -> str:
    """
    - Bounded preview of `text` for diagnostics.
    - Adds an ellipsis when trimming occurs.
    """
    text = text or ""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + " …"


def truncate_for_prompt(text: str, max_chars: int, marker: str) -> str:
    """
    Cut `text` to `max_chars` and append the visible truncation marker.
    """
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "\n\n" + marker
