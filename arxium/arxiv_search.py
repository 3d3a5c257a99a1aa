import html
import logging
import re
import requests
from typing import List, Optional

from . import config
from .errors import UpstreamError
from .models import ExternalPaper
from .rag.author_detector import AuthorHeuristics, detect_author_query

logger = logging.getLogger(__name__)

# Question words stripped from topical queries before they reach arXiv
STOP_WORDS_PATTERN = re.compile(
    r"\b(what|is|are|the|a|an|how|does|do|can|could|would|should|about|from|at|by|with)\b",
    re.IGNORECASE,
)

ENTRY_PATTERN = re.compile(r"<entry>(.*?)</entry>", re.DOTALL)
ID_PATTERN = re.compile(r"<id>(.*?)</id>", re.DOTALL)
TITLE_PATTERN = re.compile(r"<title[^>]*>(.*?)</title>", re.DOTALL)
AUTHOR_NAME_PATTERN = re.compile(r"<name>(.*?)</name>", re.DOTALL)
SUMMARY_PATTERN = re.compile(r"<summary[^>]*>(.*?)</summary>", re.DOTALL)
PUBLISHED_PATTERN = re.compile(r"<published>(.*?)</published>", re.DOTALL)
ABS_URL_PREFIX = re.compile(r"^https?://arxiv\.org/abs/")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs into single spaces and trim"""
    return re.sub(r"\s+", " ", text).strip()


def build_search_query(query: str, author_name: Optional[str] = None) -> str:
    """
    Build the arXiv search_query expression.

    Author queries become a field-scoped search (au:"Name"); topical queries
    lose their question words, falling back to the raw query if nothing is left.
    """
    if author_name:
        return f'au:"{author_name}"'
    cleaned_query = normalize_whitespace(STOP_WORDS_PATTERN.sub("", query))
    return cleaned_query or query


def _extract(pattern: re.Pattern, entry: str) -> str:
    match = pattern.search(entry)
    return html.unescape(match.group(1)) if match else ""


def parse_arxiv_feed(xml_text: str) -> List[ExternalPaper]:
    """
    Parse an arXiv Atom response into papers.

    Each <entry> is read on its own; an entry missing its id, title or abstract
    is skipped and never aborts the rest of the feed.

    Args:
        xml_text: Raw Atom XML body

    Returns:
        List of parsed papers in feed order
    """
    papers = []
    for entry_match in ENTRY_PATTERN.finditer(xml_text or ""):
        entry = entry_match.group(1)

        paper_id = ABS_URL_PREFIX.sub("", _extract(ID_PATTERN, entry).strip())
        title = normalize_whitespace(_extract(TITLE_PATTERN, entry))
        abstract = normalize_whitespace(_extract(SUMMARY_PATTERN, entry))
        authors = [
            normalize_whitespace(html.unescape(name))
            for name in AUTHOR_NAME_PATTERN.findall(entry)
            if name.strip()
        ]
        published = _extract(PUBLISHED_PATTERN, entry).strip()

        if not (paper_id and title and abstract):
            logger.debug(f"Skipping arXiv entry with missing fields (id={paper_id!r}, title={title[:40]!r})")
            continue

        papers.append(ExternalPaper(
            id=paper_id,
            title=title,
            authors=authors,
            abstract=abstract,
            url=f"https://arxiv.org/abs/{paper_id}",
            published=published,
        ))
    return papers


def filter_by_author(papers: List[ExternalPaper], author_name: str) -> List[ExternalPaper]:
    """
    Keep papers that list the detected author.

    A paper matches when an author's full name contains the detected name, or
    when the detected name contains an author's last name. The second rule
    lets common surnames through; that is accepted.
    """
    author_lower = author_name.lower()

    def matches(author: str) -> bool:
        name = author.lower()
        last_name = name.split()[-1] if name.split() else ""
        return author_lower in name or (bool(last_name) and last_name in author_lower)

    return [paper for paper in papers if any(matches(author) for author in paper.authors)]


class ArxivSearch:
    """Search adapter over the arXiv export API."""

    def __init__(
        self,
        api_url: str = config.ARXIV_API_URL,
        timeout: float = config.ARXIV_TIMEOUT,
        session: Optional[requests.Session] = None,
        heuristics: Optional[AuthorHeuristics] = None,
        fetch_size: int = config.ARXIV_MAX_RESULTS,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": config.ARXIV_USER_AGENT})
        self.heuristics = heuristics
        self.fetch_size = fetch_size

    def fetch_feed(self, search_query: str, max_results: int) -> str:
        """
        Run one arXiv query and return the raw Atom body.

        Raises:
            UpstreamError: on connection failure or a non-2xx status
        """
        params = {
            "search_query": search_query,
            "start": 0,
            "max_results": max_results,
            "sortBy": "relevance",
            "sortOrder": "descending",
        }
        try:
            response = self.session.get(self.api_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError("arXiv", str(e)) from e

        if not 200 <= response.status_code < 300:
            raise UpstreamError("arXiv", response.reason or "request failed", response.status_code)
        return response.text

    def search(self, query: str, max_results: int = config.ARXIV_MAX_RESULTS) -> List[ExternalPaper]:
        """
        Search arXiv for papers matching a query.

        Args:
            query: Raw user query
            max_results: Maximum number of papers to return

        Returns:
            Parsed papers, filtered to the detected author for author queries
        """
        detection = detect_author_query(query, self.heuristics)
        author_name = detection.author_name if detection.is_author_query else None
        if author_name:
            logger.info(f"Detected author query, searching for: {author_name}")

        search_query = build_search_query(query, author_name)
        # Over-fetch so author filtering has a full page to work with
        xml_text = self.fetch_feed(search_query, max(max_results, self.fetch_size))
        papers = parse_arxiv_feed(xml_text)

        if author_name:
            papers = filter_by_author(papers, author_name)
            logger.info(f"Filtered to {len(papers)} papers by {author_name}")

        if not papers:
            logger.warning(f"No papers found in arXiv response for query: '{query}'")

        return papers[:max_results]
