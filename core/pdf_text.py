# core/pdf_text.py
from typing import List, Optional, Sequence, Tuple
import fitz
from config.settings import settings
from core.entities import Page
from util.functions import collapse_whitespace
from util.timing import timed
import logging

logger = logging.getLogger(__name__)

# (x0, y0, x1, y1, text, block_no, line_no, word_no)
Word = Tuple[float, float, float, float, str, int, int, int]


def _line_text(parts: List[Tuple[float, str]]) -> str:
    parts.sort(key=lambda p: p[0])
    return collapse_whitespace(" ".join(t for _, t in parts))


def group_words_into_lines(
    words: Sequence[Word], y_tolerance: Optional[float] = None
) -> List[str]:
    """
    Rebuild visual lines from word boxes: sort top-to-bottom then left-to-right
    and start a new line whenever the bottom edge moves more than `y_tolerance`
    points away from the first word of the current line.
    """
    tol = settings.LINE_Y_TOLERANCE if y_tolerance is None else y_tolerance
    items = [(w[3], w[0], collapse_whitespace(w[4])) for w in words]
    items = [it for it in items if it[2]]
    items.sort(key=lambda it: (it[0], it[1]))

    lines: List[str] = []
    current_y: Optional[float] = None
    parts: List[Tuple[float, str]] = []
    for y, x, text in items:
        if current_y is not None and abs(y - current_y) > tol:
            line = _line_text(parts)
            if line:
                lines.append(line)
            parts = []
            current_y = None
        if current_y is None:
            current_y = y
        parts.append((x, text))
    if parts:
        line = _line_text(parts)
        if line:
            lines.append(line)
    return lines


def extract_page_lines(file_bytes: bytes) -> Optional[List[Page]]:
    """
    Return the PDF text layer as pages of lines, or None when the PDF cannot be
    opened or its text layer is too thin to cite from (typical of scans).
    OCR still provides the document text in that case, so failures are logged only.
    """
    try:
        pages: List[Page] = []
        with timed(logger, "pdf.open"):
            with fitz.open(stream=file_bytes, filetype="pdf") as doc:
                with timed(logger, "pdf.lines", pages=doc.page_count):
                    for i in range(doc.page_count):
                        words = doc.load_page(i).get_text("words")
                        pages.append(
                            Page(
                                page_number=i + 1,
                                lines=tuple(group_words_into_lines(words)),
                            )
                        )
    except Exception:
        # do not log payloads
        logger.error("pdf.parse.error", exc_info=True)
        return None

    total_chars = sum(len(" ".join(p.lines)) for p in pages)
    if total_chars < settings.MIN_TEXT_LAYER_CHARS:
        logger.info("pdf.text_layer.thin chars=%d pages=%d", total_chars, len(pages))
        return None
    logger.info("pdf.pages count=%d chars=%d", len(pages), total_chars)
    return pages
