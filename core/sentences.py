# core/sentences.py
import re
from typing import List, Optional
import nltk
from config.settings import settings
from util.functions import collapse_whitespace
import logging

logger = logging.getLogger(__name__)

_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")


def _regex_split(text: str) -> List[str]:
    return [s.strip() for s in _BOUNDARY.split(text)]


def _split(text: str) -> List[str]:
    try:
        return nltk.sent_tokenize(text, language="english")
    except LookupError:
        # Punkt data is not installed; the punctuation heuristic still works.
        logger.warning("sentences.punkt.missing fallback=regex")
        return _regex_split(text)


def extract_sentences(
    text: Optional[str],
    limit: Optional[int] = None,
    min_chars: Optional[int] = None,
) -> List[str]:
    """
    Candidate sentences of `text` in document order.
    Sentences shorter than `min_chars` (after whitespace collapse) are dropped and
    at most `limit` are returned.
    """
    limit = settings.SENTENCE_LIMIT if limit is None else limit
    min_chars = settings.MIN_SENTENCE_CHARS if min_chars is None else min_chars
    raw = collapse_whitespace(text)
    if not raw:
        return []

    out: List[str] = []
    for part in _split(raw):
        s = collapse_whitespace(part)
        if len(s) >= min_chars:
            out.append(s)
            if len(out) >= limit:
                break
    logger.info("sentences.extract chars=%d count=%d", len(raw), len(out))
    return out
