"""Tests for core.citation_matcher."""
from core.citation_matcher import better_citation, find_citation
from core.entities import Citation, Page
from core.search_index import build_page_search_index

LONG_SNIPPET = (
    "Recent advances in deep learning have transformed natural language "
    "processing tasks."
)


def _index(*pages: Page):
    return build_page_search_index(list(pages))


class TestFindCitation:
    def test_missing_inputs(self) -> None:
        index = _index(Page(1, ("some text that is long enough to match",)))
        assert find_citation("", index) is None
        assert find_citation(None, index) is None
        assert find_citation("some text that is long enough", None) is None

    def test_short_snippet_never_matches(self) -> None:
        index = _index(Page(1, ("The cat sat.", "It was happy.")))
        # "the cat sat" is present verbatim but below the 20-char minimum
        assert find_citation("the cat sat", index) is None

    def test_exact_single_line(self) -> None:
        index = _index(Page(1, ("The cat sat on the warm mat.", "It was happy.")))
        assert find_citation("the cat sat on the warm mat", index) == Citation(
            page=1, line_start=1, line_end=1, confidence=1.0
        )

    def test_exact_spans_lines(self) -> None:
        index = _index(
            Page(7, ("Alpha beta gamma delta", "epsilon zeta eta theta", "iota"))
        )
        c = find_citation("Gamma delta, epsilon zeta", index)
        assert c == Citation(page=7, line_start=1, line_end=2, confidence=1.0)

    def test_exact_match_ignores_case_and_punctuation(self) -> None:
        index = _index(Page(2, ("“Results,” she said, “were strong.”",)))
        c = find_citation('"RESULTS," she said, "were strong."', index)
        assert c is not None
        assert c.page == 2
        assert c.confidence == 1.0

    def test_first_page_with_exact_hit_wins(self) -> None:
        line = "this running header repeats on every single page"
        index = _index(Page(5, (line,)), Page(1, (line,)))
        c = find_citation(line, index)
        assert c.page == 5
        assert c.confidence == 1.0

    def test_exact_hit_beats_earlier_prefix_hit(self) -> None:
        prefix_only = Page(
            1, ("recent advances in deep learning have transformed natural language modeling",)
        )
        exact = Page(2, (LONG_SNIPPET,))
        c = find_citation(LONG_SNIPPET, _index(prefix_only, exact))
        assert c == Citation(page=2, line_start=1, line_end=1, confidence=1.0)

    def test_prefix_match(self) -> None:
        index = _index(
            Page(
                3,
                (
                    "recent advances in deep learning have transformed natural language",
                    "modeling for many years now",
                ),
            )
        )
        c = find_citation(LONG_SNIPPET, index)
        assert c == Citation(page=3, line_start=1, line_end=1, confidence=0.6)

    def test_prefix_tie_prefers_lower_page(self) -> None:
        text = ("recent advances in deep learning have transformed natural language modeling",)
        c = find_citation(LONG_SNIPPET, _index(Page(9, text), Page(4, text)))
        assert c.page == 4
        assert c.confidence == 0.6

    def test_short_prefix_does_not_fuzzy_match(self) -> None:
        # 22 normalized chars: long enough to search, too short for a prefix match
        index = _index(Page(1, ("completely different content on this page",)))
        assert find_citation("absent snippet text xy", index) is None

    def test_deterministic(self) -> None:
        text = ("recent advances in deep learning have transformed natural language modeling",)
        index = _index(Page(3, text), Page(2, ("filler",) + text), Page(2, text))
        results = {find_citation(LONG_SNIPPET, index) for _ in range(5)}
        assert results == {Citation(page=2, line_start=1, line_end=1, confidence=0.6)}


class TestBetterCitation:
    def test_none_handling(self) -> None:
        a = Citation(1, 1, 1, 0.6)
        assert better_citation(None, a) is a
        assert better_citation(a, None) is a
        assert better_citation(None, None) is None

    def test_ordering(self) -> None:
        low = Citation(1, 1, 1, 0.6)
        high = Citation(9, 9, 9, 1.0)
        assert better_citation(low, high) is high
        assert better_citation(Citation(3, 1, 1, 0.6), Citation(2, 5, 5, 0.6)).page == 2
        assert better_citation(Citation(2, 4, 4, 0.6), Citation(2, 3, 3, 0.6)).line_start == 3

    def test_full_tie_keeps_earlier(self) -> None:
        a = Citation(2, 3, 3, 0.6)
        b = Citation(2, 3, 4, 0.6)
        assert better_citation(a, b) is a
