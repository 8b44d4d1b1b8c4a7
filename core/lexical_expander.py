# core/lexical_expander.py
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence
from config.settings import settings
from core.entities import LexicalHit, PhraseHit
from core.lexicon import DEFAULT_LEXICON, Lexicon
from util.functions import normalize_for_search
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LexicalExpansion:
    verbs: List[LexicalHit]
    transitions: List[LexicalHit]


class _Tally:
    """Per-key count plus the first sentence the key was seen in."""

    def __init__(self) -> None:
        self.counts: Dict[str, int] = {}
        self.examples: Dict[str, str] = {}

    def add(self, key: str, sentence: str) -> None:
        self.counts[key] = self.counts.get(key, 0) + 1
        self.examples.setdefault(key, sentence)

    def ranked(self, glosses: Mapping[str, str], top_n: int) -> List[LexicalHit]:
        # sorted() is stable: equal counts keep first-encountered order
        order = sorted(self.counts.items(), key=lambda kv: kv[1], reverse=True)
        return [
            LexicalHit(
                key=key,
                gloss=glosses.get(key, ""),
                example=self.examples.get(key, ""),
                count=count,
            )
            for key, count in order[:top_n]
        ]


def expand_lexicon(
    sentences: Sequence[str],
    lexicon: Lexicon = DEFAULT_LEXICON,
    top_n: Optional[int] = None,
) -> LexicalExpansion:
    """
    Count academic verbs (whole-token match) and transition phrases (substring of
    the normalized sentence) across `sentences`; keep the top `top_n` of each.
    """
    top_n = settings.LEXICON_TOP_N if top_n is None else top_n
    verbs = _Tally()
    transitions = _Tally()
    transition_keys = [(k, normalize_for_search(k)) for k in lexicon.transitions]

    for s in sentences:
        norm = normalize_for_search(s)
        for token in norm.split(" "):
            if token in lexicon.verbs:
                verbs.add(token, s)
        for key, needle in transition_keys:
            if needle and needle in norm:
                transitions.add(key, s)

    out = LexicalExpansion(
        verbs=verbs.ranked(lexicon.verbs, top_n),
        transitions=transitions.ranked(lexicon.transitions, top_n),
    )
    logger.info(
        "lexicon.expand sentences=%d verbs=%d transitions=%d",
        len(sentences),
        len(out.verbs),
        len(out.transitions),
    )
    return out


def find_phrases_in_sentence(
    sentence: str, lexicon: Lexicon = DEFAULT_LEXICON
) -> List[PhraseHit]:
    norm = normalize_for_search(sentence)
    hits: List[PhraseHit] = []
    for phrase, usage in lexicon.phrases:
        needle = normalize_for_search(phrase)
        if needle and needle in norm:
            hits.append(PhraseHit(phrase=phrase, usage=usage))
    return hits
