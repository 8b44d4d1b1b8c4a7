# core/result_merger.py
from typing import Callable, Iterable, List, Optional, Set, TypeVar

T = TypeVar("T")


def merge_deduped(
    primary: Optional[Iterable[T]],
    extra: Optional[Iterable[T]],
    key_of: Callable[[T], Optional[str]],
) -> List[T]:
    """
    `primary` items in order, then `extra` items whose key is new.
    Keys compare case-insensitively; items without a key are dropped from both.
    Idempotent: merging the same `extra` twice equals merging it once.
    """
    out: List[T] = []
    seen: Set[str] = set()
    for item in list(primary or []) + list(extra or []):
        key = (key_of(item) or "").strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out
