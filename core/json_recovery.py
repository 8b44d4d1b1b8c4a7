# core/json_recovery.py
"""
Recover a structured record from noisy model text.

Strategies run in order and each returns a RecoveryAttempt; the first success
wins:

1. direct    - parse the text as-is
2. fenced    - take the body of the first ```json (or bare ```) fence
3. balanced  - take the first balanced [...] (top-level arrays) or {...} region,
               inside the fence body first and then in the whole text

Stages 2 and 3 run `repair_punctuation` before parsing: trailing commas are
dropped and missing commas between adjacent values are inserted.
"""
import json
from typing import Any, Callable, List, Optional
from pydantic import ValidationError
from config.settings import settings
from core.entities import RecoveryAttempt
from model.analysis import AnalysisRecord
from util.errors import EmptyResponse, UnrecoverableFormat
from util.functions import clip_chars
from util.types import RecoveryStage
import logging

logger = logging.getLogger(__name__)

FENCE = "```"
JSON_FENCE = "```json"
_CLOSERS = "}]"
_VALUE_OPENERS = '{["'


def _parse(text: str) -> Any:
    """json.loads that only accepts containers; a bare scalar is not a record."""
    value = json.loads(text)
    if not isinstance(value, (dict, list)):
        raise ValueError(f"expected object or array, got {type(value).__name__}")
    return value


def _next_significant(s: str, i: int) -> int:
    while i < len(s) and s[i].isspace():
        i += 1
    return i


def repair_punctuation(s: str) -> str:
    """
    Fix separators outside string literals:
    - `,` directly before `}` or `]` is removed
    - `,` is inserted between `}`/`]` and a following `{`, `[` or `"`
    """
    out: List[str] = []
    in_string = False
    escaped = False
    for i, ch in enumerate(s):
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
        elif ch == ",":
            j = _next_significant(s, i + 1)
            if j < len(s) and s[j] in _CLOSERS:
                continue
            out.append(ch)
        elif ch in _CLOSERS:
            out.append(ch)
            j = _next_significant(s, i + 1)
            if j < len(s) and s[j] in _VALUE_OPENERS:
                out.append(",")
        else:
            out.append(ch)
    return "".join(out)


def strip_code_fence(s: str) -> Optional[str]:
    """
    Body of the first fenced block, preferring a ```json fence over a bare one.
    An unterminated fence yields everything after it. None when there is no fence.
    """
    marker = JSON_FENCE if JSON_FENCE in s else FENCE if FENCE in s else None
    if marker is None:
        return None
    body = s.split(marker, 1)[1]
    return body.split(FENCE, 1)[0].strip()


def _balanced_from(s: str, start: int) -> Optional[str]:
    """
    Substring from the bracket at `start` through the bracket that closes it.
    Brackets inside string literals (escapes respected) do not count.
    None when it never closes.
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(s)):
        ch = s[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return s[start : i + 1]
    return None


def extract_balanced_object(s: str) -> Optional[str]:
    """First `{...}` region whose brackets balance; None when absent or unclosed."""
    start = s.find("{")
    return None if start == -1 else _balanced_from(s, start)


def extract_balanced_array(s: str) -> Optional[str]:
    """First `[...]` region whose brackets balance; None when absent or unclosed."""
    start = s.find("[")
    return None if start == -1 else _balanced_from(s, start)


def _balanced_regions(source: str) -> List[str]:
    # A top-level array is taken whole before looking for its first element
    regions: List[Optional[str]] = []
    if source.startswith("["):
        regions.append(extract_balanced_array(source))
    regions.append(extract_balanced_object(source))
    return [r for r in regions if r is not None]


def _attempt(stage: RecoveryStage, text: Optional[str]) -> RecoveryAttempt:
    if text is None:
        return RecoveryAttempt(stage=stage, ok=False, reason="not applicable")
    try:
        return RecoveryAttempt(stage=stage, ok=True, value=_parse(text))
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        return RecoveryAttempt(stage=stage, ok=False, reason=str(e))


def _direct(raw: str) -> RecoveryAttempt:
    return _attempt("direct", raw)


def _fenced(raw: str) -> RecoveryAttempt:
    body = strip_code_fence(raw)
    return _attempt("fenced", repair_punctuation(body) if body is not None else None)


def _balanced(raw: str) -> RecoveryAttempt:
    body = strip_code_fence(raw)
    sources = [raw] if body is None else [body, raw]
    attempt = _attempt("balanced", None)
    for source in sources:
        for region in _balanced_regions(source):
            attempt = _attempt("balanced", repair_punctuation(region))
            if attempt.ok:
                return attempt
    return attempt


Strategy = Callable[[str], RecoveryAttempt]
STRATEGIES: tuple[Strategy, ...] = (_direct, _fenced, _balanced)


def recover_structured_output(raw: Optional[str]) -> Any:
    """
    Turn model text into a parsed JSON container.
    Raises EmptyResponse for blank input and UnrecoverableFormat when every
    strategy fails (the exception carries a bounded preview of `raw`).
    """
    text = (raw or "").strip()
    if not text:
        raise EmptyResponse()

    reasons: List[str] = []
    for strategy in STRATEGIES:
        attempt = strategy(text)
        logger.debug(
            "recover.stage stage=%s ok=%s reason=%s",
            attempt.stage,
            attempt.ok,
            attempt.reason,
        )
        if attempt.ok:
            logger.info("recover.ok stage=%s chars=%d", attempt.stage, len(text))
            return attempt.value
        reasons.append(f"{attempt.stage}: {attempt.reason}")

    logger.warning("recover.failed chars=%d", len(text))
    raise UnrecoverableFormat(
        preview=clip_chars(text, settings.ERROR_PREVIEW_CHARS),
        reason="; ".join(reasons),
    )


def recover_analysis_record(raw: Optional[str]) -> AnalysisRecord:
    """
    Recover and validate against the AnalysisRecord schema; schema violations are
    reported as UnrecoverableFormat so callers handle one failure type.
    """
    value = recover_structured_output(raw)
    preview = clip_chars((raw or "").strip(), settings.ERROR_PREVIEW_CHARS)
    if not isinstance(value, dict):
        raise UnrecoverableFormat(preview=preview, reason="top-level value is not an object")
    try:
        return AnalysisRecord.model_validate(value)
    except ValidationError as e:
        raise UnrecoverableFormat(
            preview=preview, reason=f"schema: {e.error_count()} error(s)"
        ) from e
