"""Tests for util.functions text helpers."""
import pytest

from util.functions import (
    clip_chars,
    collapse_whitespace,
    normalize_for_search,
    truncate_for_prompt,
)


class TestNormalizeForSearch:
    def test_lowercases_and_collapses_whitespace(self) -> None:
        assert normalize_for_search("  The   Cat\n\tSat  ") == "the cat sat"

    def test_strips_soft_hyphen(self) -> None:
        assert normalize_for_search("inter\u00adnational") == "international"

    def test_curly_quotes_become_straight(self) -> None:
        assert normalize_for_search("“quoted” ‘it’s’") == "\"quoted\" 'it's'"

    def test_punctuation_becomes_space(self) -> None:
        assert normalize_for_search("results (p<0.05), i.e. strong!") == "results p 0 05 i e strong"

    def test_keeps_hyphen_and_digits(self) -> None:
        assert normalize_for_search("state-of-the-art 2024") == "state-of-the-art 2024"

    def test_none_and_empty(self) -> None:
        assert normalize_for_search(None) == ""
        assert normalize_for_search("") == ""
        assert normalize_for_search("!!!") == ""

    @pytest.mark.parametrize(
        "s",
        [
            "Hello, World!",
            "“Smart” ‘quotes’ — dashes – and\u00adsoft",
            "  multiple   spaces\n\nand\tTabs ",
            "Ünïcödé letters and 数字 mixed",
            "'\"-'\"- ",
        ],
    )
    def test_idempotent(self, s: str) -> None:
        once = normalize_for_search(s)
        assert normalize_for_search(once) == once


class TestClipAndTruncate:
    def test_clip_short_text_unchanged(self) -> None:
        assert clip_chars("short", 10) == "short"

    def test_clip_adds_ellipsis(self) -> None:
        out = clip_chars("x" * 500, 400)
        assert out.startswith("x" * 400)
        assert out.endswith("…")
        assert len(out) == 402

    def test_truncate_appends_marker(self) -> None:
        out = truncate_for_prompt("abcdef", 3, "[cut]")
        assert out == "abc\n\n[cut]"

    def test_truncate_within_limit(self) -> None:
        assert truncate_for_prompt("abc", 3, "[cut]") == "abc"

    def test_collapse_whitespace(self) -> None:
        assert collapse_whitespace(" a \n b ") == "a b"
        assert collapse_whitespace(None) == ""
