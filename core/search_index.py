# core/search_index.py
from bisect import bisect_right
from typing import List, Optional, Sequence
from core.entities import Page, PageIndexEntry
from util.functions import normalize_for_search
import logging

logger = logging.getLogger(__name__)


def build_page_entry(page: Page) -> PageIndexEntry:
    normalized = tuple(normalize_for_search(line) for line in page.lines)
    starts: List[int] = []
    offset = 0
    for line in normalized:
        starts.append(offset)
        offset += len(line) + 1  # joined with one space
    return PageIndexEntry(
        page_number=page.page_number,
        normalized_lines=normalized,
        joined=" ".join(normalized),
        line_starts=tuple(starts),
    )


def build_page_search_index(
    pages: Optional[Sequence[Page]],
) -> Optional[List[PageIndexEntry]]:
    """
    Normalize every page of the text layer for substring search.
    Returns None when there are no pages (e.g. scanned PDFs without a text layer).
    """
    if not pages:
        return None
    index = [build_page_entry(p) for p in pages]
    logger.info(
        "index.build pages=%d lines=%d",
        len(index),
        sum(len(e.line_starts) for e in index),
    )
    return index


def locate_line(line_starts: Sequence[int], offset: int) -> int:
    """
    0-based index of the line containing `offset`: the greatest i with
    line_starts[i] <= offset, clamped to the table. 0 for an empty table.
    """
    if not line_starts:
        return 0
    i = bisect_right(line_starts, offset) - 1
    return max(0, min(len(line_starts) - 1, i))
