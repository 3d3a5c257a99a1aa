"""Tests for arxium.arxiv_search: arXiv Atom parsing and the search adapter.

All tests use a fake requests session to avoid real network calls. The feed
fixture mirrors the shape of actual export.arxiv.org responses.
"""

import pytest

from arxium.arxiv_search import (
    ArxivSearch,
    build_search_query,
    filter_by_author,
    parse_arxiv_feed,
)
from arxium.errors import UpstreamError

from conftest import ARXIV_FEED, EMPTY_FEED, FakeResponse, FakeSession, make_paper


class TestParseArxivFeed:
    def test_skips_entries_with_missing_fields(self):
        papers = parse_arxiv_feed(ARXIV_FEED)
        assert [p.id for p in papers] == ["1706.03762v7", "1810.04805v2"]

    def test_multiline_fields_are_collapsed(self):
        paper = parse_arxiv_feed(ARXIV_FEED)[0]
        assert paper.title == "Attention Is All You Need"
        assert paper.abstract.startswith("The dominant sequence transduction models")
        assert "\n" not in paper.abstract
        assert paper.abstract == paper.abstract.strip()

    def test_entities_are_unescaped(self):
        paper = parse_arxiv_feed(ARXIV_FEED)[0]
        assert "networks & attention." in paper.abstract

    def test_fields(self):
        paper = parse_arxiv_feed(ARXIV_FEED)[1]
        assert paper.authors == ["Jacob Devlin", "Geoffrey E. Hinton"]
        assert paper.url == "https://arxiv.org/abs/1810.04805v2"
        assert paper.published == "2018-10-11T00:00:00Z"

    @pytest.mark.parametrize("body", [EMPTY_FEED, "", "not xml at all"])
    def test_no_entries(self, body):
        assert parse_arxiv_feed(body) == []


class TestBuildSearchQuery:
    def test_author_query(self):
        assert build_search_query("papers by Geoffrey Hinton", "Geoffrey Hinton") == 'au:"Geoffrey Hinton"'

    def test_stop_words_removed(self):
        assert build_search_query("What is the attention mechanism?") == "attention mechanism?"

    def test_only_stop_words_falls_back_to_raw_query(self):
        assert build_search_query("what is the") == "what is the"


class TestFilterByAuthor:
    def test_last_name_match(self):
        """An author listed as "Geoffrey E. Hinton" matches "Geoffrey Hinton" by last name."""
        kept = make_paper(paper_id="a", authors=["Geoffrey E. Hinton"])
        dropped = make_paper(paper_id="b", authors=["Alex Krizhevsky"])
        assert [p.id for p in filter_by_author([kept, dropped], "Geoffrey Hinton")] == ["a"]

    def test_full_name_match_is_case_insensitive(self):
        paper = make_paper(authors=["YANN LECUN"])
        assert filter_by_author([paper], "Yann LeCun") == [paper]


class TestArxivSearch:
    def test_topical_search_request(self):
        session = FakeSession(FakeResponse(text=ARXIV_FEED))
        searcher = ArxivSearch(api_url="https://arxiv.test/api/query", session=session, fetch_size=10)

        papers = searcher.search("What is attention?", max_results=5)

        assert len(papers) == 2
        call = session.calls[0]
        assert call["url"] == "https://arxiv.test/api/query"
        assert call["params"]["search_query"] == "attention?"
        assert call["params"]["max_results"] == 10
        assert call["params"]["sortBy"] == "relevance"
        assert call["params"]["sortOrder"] == "descending"
        assert "User-Agent" in session.headers

    def test_author_search_filters_results(self):
        session = FakeSession(FakeResponse(text=ARXIV_FEED))
        searcher = ArxivSearch(session=session)

        papers = searcher.search("papers by Geoffrey Hinton")

        assert session.calls[0]["params"]["search_query"] == 'au:"Geoffrey Hinton"'
        assert [p.id for p in papers] == ["1810.04805v2"]

    def test_over_fetches_for_small_requests(self):
        """arXiv is always asked for a full page so author filtering has candidates."""
        session = FakeSession(FakeResponse(text=ARXIV_FEED))
        papers = ArxivSearch(session=session, fetch_size=10).search("papers by Geoffrey Hinton", max_results=3)

        assert session.calls[0]["params"]["max_results"] == 10
        assert [p.id for p in papers] == ["1810.04805v2"]

    def test_larger_requests_are_not_capped(self):
        session = FakeSession(FakeResponse(text=ARXIV_FEED))
        ArxivSearch(session=session, fetch_size=10).search("attention", max_results=25)
        assert session.calls[0]["params"]["max_results"] == 25

    def test_results_truncated(self):
        session = FakeSession(FakeResponse(text=ARXIV_FEED))
        assert len(ArxivSearch(session=session).search("attention", max_results=1)) == 1

    def test_http_error(self):
        session = FakeSession(FakeResponse(status_code=503, reason="Service Unavailable"))
        with pytest.raises(UpstreamError) as exc:
            ArxivSearch(session=session).search("attention")
        assert exc.value.status_code == 503

    def test_connection_error(self, request_error):
        session = FakeSession(error=request_error)
        with pytest.raises(UpstreamError):
            ArxivSearch(session=session).search("attention")
