# core/citation_matcher.py
from typing import Optional, Sequence
from config.settings import settings
from core.entities import Citation, PageIndexEntry
from core.search_index import locate_line
from util.functions import normalize_for_search

EXACT_CONFIDENCE = 1.0
PREFIX_CONFIDENCE = 0.6


def better_citation(a: Optional[Citation], b: Optional[Citation]) -> Optional[Citation]:
    """
    Deterministic reduction step: higher confidence, then lower page, then lower
    start line; on a full tie keep `a` (the earlier candidate).
    """
    if b is None:
        return a
    if a is None:
        return b
    if b.confidence != a.confidence:
        return b if b.confidence > a.confidence else a
    if b.page != a.page:
        return b if b.page < a.page else a
    if b.line_start != a.line_start:
        return b if b.line_start < a.line_start else a
    return a


def _citation_at(
    entry: PageIndexEntry, pos: int, needle: str, confidence: float
) -> Citation:
    return Citation(
        page=entry.page_number,
        line_start=locate_line(entry.line_starts, pos) + 1,
        line_end=locate_line(entry.line_starts, pos + len(needle)) + 1,
        confidence=confidence,
    )


def find_citation(
    snippet: Optional[str], index: Optional[Sequence[PageIndexEntry]]
) -> Optional[Citation]:
    """
    Locate `snippet` in the page index.

    Exact matches short-circuit: the first page (in index order) containing the
    whole normalized snippet wins with confidence 1.0. Otherwise the leading
    characters of the snippet are searched on every page and the best prefix hit
    is returned with confidence 0.6. None when nothing matches or the snippet is
    too short to place reliably.
    """
    if not snippet or not index:
        return None
    needle = normalize_for_search(snippet)
    if len(needle) < settings.MIN_CITATION_CHARS:
        return None

    for entry in index:
        pos = entry.joined.find(needle)
        if pos != -1:
            return _citation_at(entry, pos, needle, EXACT_CONFIDENCE)

    prefix = needle[: settings.FUZZY_PREFIX_CHARS]
    if len(prefix) < settings.MIN_FUZZY_PREFIX_CHARS:
        return None

    best: Optional[Citation] = None
    for entry in index:
        pos = entry.joined.find(prefix)
        if pos != -1:
            best = better_citation(
                best, _citation_at(entry, pos, prefix, PREFIX_CONFIDENCE)
            )
    return best
