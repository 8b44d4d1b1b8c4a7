# util/types.py
from typing import Literal, TypedDict


# Flow: Narrow types for payloads that cross module boundaries as plain dicts.
RecoveryStage = Literal["direct", "fenced", "balanced"]


class CitationPayload(TypedDict):
    page: int
    lineStart: int
    lineEnd: int
    confidence: float


class UsagePayload(TypedDict, total=False):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
