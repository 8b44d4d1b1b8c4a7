# core/entities.py
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union
from util.types import CitationPayload, RecoveryStage, UsagePayload


@dataclass(frozen=True)
class Page:
    """
    One page of the text layer, lines ordered top-to-bottom as reconstructed upstream.
    """

    page_number: int  # 1-based
    lines: Tuple[str, ...]


@dataclass(frozen=True)
class PageIndexEntry:
    page_number: int
    normalized_lines: Tuple[str, ...]
    joined: str
    line_starts: Tuple[int, ...]  # offset of each normalized line inside `joined`


@dataclass(frozen=True)
class Citation:
    page: int
    line_start: int  # 1-based, inclusive
    line_end: int
    confidence: float  # 1.0 exact, 0.6 prefix match

    def as_payload(self) -> CitationPayload:
        return {
            "page": self.page,
            "lineStart": self.line_start,
            "lineEnd": self.line_end,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class LexicalHit:
    key: str
    gloss: str  # meaning for verbs, usage for transitions
    example: str
    count: int


@dataclass(frozen=True)
class PhraseHit:
    phrase: str
    usage: str


@dataclass(frozen=True)
class CompletionDiagnostics:
    id: Optional[str] = None
    finish_reason: Optional[str] = None
    usage: Optional[UsagePayload] = None


@dataclass(frozen=True)
class Completion:
    content: str
    truncated: bool
    diagnostics: CompletionDiagnostics = field(default_factory=CompletionDiagnostics)


@dataclass(frozen=True)
class PromptVariant:
    name: str
    max_per_category: int
    max_example_chars: int
    max_output_tokens: int


@dataclass(frozen=True)
class RecoveryAttempt:
    """
    Tagged result of one recovery strategy: `ok` with `value`, or a failure `reason`.
    """

    stage: RecoveryStage
    ok: bool
    value: Union[Dict[str, Any], list, None] = None
    reason: str = ""
