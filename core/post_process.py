# core/post_process.py
from typing import List, Optional, Sequence
from core.citation_matcher import find_citation
from core.entities import Citation, LexicalHit, Page, PageIndexEntry
from core.lexical_expander import expand_lexicon, find_phrases_in_sentence
from core.result_merger import merge_deduped
from core.search_index import build_page_search_index
from core.sentences import extract_sentences
from model.analysis import (
    AcademicVerb,
    AnalysisRecord,
    CitationModel,
    PhraseHitModel,
    SentenceInsight,
    SentenceInsights,
    TransitionWord,
)
from util.timing import timed
import logging

logger = logging.getLogger(__name__)

NOTE_WITH_INDEX = (
    "Page and line numbers were estimated per sentence; depending on the PDF "
    "layout, line numbers may be slightly off."
)
NOTE_WITHOUT_INDEX = (
    "Page/line citations cannot be estimated for scanned PDFs. Processing a PDF "
    "with a selectable text layer improves accuracy."
)


def _citation_model(c: Optional[Citation]) -> Optional[CitationModel]:
    return CitationModel(**c.as_payload()) if c else None


def _attach_expression_citations(
    record: AnalysisRecord, index: Optional[List[PageIndexEntry]]
) -> int:
    found = 0
    for section in record.sections:
        for expr in section.expressions:
            citation = find_citation(expr.snippet(), index)
            if citation:
                expr.citation = _citation_model(citation)
                found += 1
    return found


def _sentence_insights(
    sentences: Sequence[str],
    index: Optional[List[PageIndexEntry]],
    method: str,
) -> SentenceInsights:
    items = [
        SentenceInsight(
            sentence=s,
            citation=_citation_model(find_citation(s, index)),
            phrases=[
                PhraseHitModel(phrase=h.phrase, usage=h.usage)
                for h in find_phrases_in_sentence(s)
            ],
        )
        for s in sentences
    ]
    return SentenceInsights(
        method=method,
        note=NOTE_WITH_INDEX if index else NOTE_WITHOUT_INDEX,
        items=items,
    )


def _verb(hit: LexicalHit) -> AcademicVerb:
    return AcademicVerb(
        verb=hit.key, meaning=hit.gloss, example=hit.example, count=hit.count
    )


def _transition(hit: LexicalHit) -> TransitionWord:
    return TransitionWord(
        word=hit.key, usage=hit.gloss, example=hit.example, count=hit.count
    )


def post_process(
    record: AnalysisRecord,
    pages: Optional[Sequence[Page]],
    document_text: str,
    method: str = "upstage-ocr",
) -> AnalysisRecord:
    """
    Enrich a recovered record:
    1) cite each expression (example sentence, else the expression itself)
    2) build the sentence-level view with citations and fixed-phrase hits
    3) merge locally mined verbs/transitions after the model's own entries
    The input record is not modified; a deep copy is returned.
    """
    out = record.model_copy(deep=True)
    with timed(logger, "postprocess", pages=len(pages or [])):
        index = build_page_search_index(pages)
        cited = _attach_expression_citations(out, index)

        sentences = extract_sentences(document_text)
        out.sentence_insights = _sentence_insights(sentences, index, method)

        local = expand_lexicon(sentences)
        out.academic_verbs = merge_deduped(
            out.academic_verbs, [_verb(h) for h in local.verbs], lambda v: v.verb
        )
        out.transition_words = merge_deduped(
            out.transition_words,
            [_transition(h) for h in local.transitions],
            lambda t: t.word,
        )
    logger.info(
        "postprocess.result cited=%d sentences=%d verbs=%d transitions=%d",
        cited,
        len(sentences),
        len(out.academic_verbs),
        len(out.transition_words),
    )
    return out
