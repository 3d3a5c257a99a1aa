"""
Author query detection.

Decides whether a raw query asks for the work of a specific researcher
("papers by Geoffrey Hinton", "Yann LeCun recent work") and extracts the name,
so the arXiv adapter can switch to an author-scoped search.

Detection runs in priority order and the first hit wins:
1. Explicit patterns ("papers by X", "X from ...", a bare two-word name)
2. The known-researcher table
3. A short-query heuristic guarded by a denylist of ML terms
"""

import json
import logging
import re
from typing import Dict, List, Optional, Union

from pydantic import BaseModel

from .. import config
from ..models import AuthorDetectionResult

logger = logging.getLogger(__name__)

# A capitalized name word: "Hinton", "LeCun", "Fei-Fei", "Jürgen"
NAME_WORD = r"[A-Z][A-Za-z\u00C0-\u017F'\-]+"

# Words that can never be part of a name, even when capitalized ("What Is BERT")
NON_NAME_WORDS = {
    "what", "is", "are", "the", "a", "an", "how", "does", "do", "can", "could",
    "would", "should", "about", "from", "at", "by", "with", "why", "which",
    "who", "when", "where", "explain", "describe", "tell", "show", "me", "find",
}

EXPLICIT_PATTERN = re.compile(
    rf"(?i:\b(?:papers?|work|research|authored|publications)\s+by)\s+({NAME_WORD}(?:\s+{NAME_WORD})+)"
)
TRAILING_CONTEXT_PATTERN = re.compile(
    rf"({NAME_WORD}\s+{NAME_WORD})(?i:\s+(?:@|(?:from|at|recent|work)\b))"
)
BARE_NAME_PATTERN = re.compile(rf"({NAME_WORD}\s+{NAME_WORD})(?i:\s+(?:from|at))?")
LEADING_NAME_PATTERN = re.compile(rf"^({NAME_WORD}\s+{NAME_WORD})(?:\s+.*)?$")

MAX_HEURISTIC_TOKENS = 6


class AuthorHeuristics(BaseModel):
    """
    Lookup tables behind author detection, loaded from JSON so they can be
    extended without code changes.

    Attributes:
        known_researchers: lowercased name -> canonical spelling
        common_terms: lowercased ML phrases that must never be read as a name
    """
    known_researchers: Dict[str, str] = {}
    common_terms: List[str] = []

    @classmethod
    def from_data(cls, data: Dict[str, Union[List[str], Dict[str, str]]]) -> "AuthorHeuristics":
        raw_names = data.get("known_researchers", [])
        if isinstance(raw_names, dict):
            names = {key.lower(): value for key, value in raw_names.items()}
        else:
            names = {name.lower(): name for name in raw_names}
        terms = [term.lower() for term in data.get("common_terms", [])]
        return cls(known_researchers=names, common_terms=terms)

    @classmethod
    def load(cls, path: str) -> "AuthorHeuristics":
        """Load the tables from a JSON file"""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        heuristics = cls.from_data(data)
        logger.info(
            f"Loaded author heuristics from {path}: {len(heuristics.known_researchers)} researchers, "
            f"{len(heuristics.common_terms)} common terms"
        )
        return heuristics

    def contains_common_term(self, query: str) -> bool:
        query_lower = query.lower()
        return any(term in query_lower for term in self.common_terms)


_heuristics: Optional[AuthorHeuristics] = None


def get_heuristics() -> AuthorHeuristics:
    """Get or load the process-wide heuristic tables."""
    global _heuristics
    if _heuristics is None:
        _heuristics = AuthorHeuristics.load(config.AUTHOR_HEURISTICS_FILE)
    return _heuristics


def _looks_like_name(candidate: str) -> bool:
    return not any(word.lower() in NON_NAME_WORDS for word in candidate.split())


def _trim_to_name(candidate: str) -> Optional[str]:
    """Cut a greedy capture at its first non-name word; a name needs two words left"""
    words = []
    for word in candidate.split():
        if word.lower() in NON_NAME_WORDS:
            break
        words.append(word)
    return " ".join(words) if len(words) >= 2 else None


def _capitalize_name(name: str) -> str:
    return " ".join(part[:1].upper() + part[1:].lower() for part in name.split())


def _match_explicit_patterns(query: str, heuristics: AuthorHeuristics) -> Optional[str]:
    match = EXPLICIT_PATTERN.search(query)
    if match:
        author_name = _trim_to_name(match.group(1))
        if author_name:
            return author_name

    # Without a "by" cue a two-word domain term looks exactly like a name
    if heuristics.contains_common_term(query):
        return None

    match = TRAILING_CONTEXT_PATTERN.search(query)
    if match and _looks_like_name(match.group(1)):
        return match.group(1).strip()

    match = BARE_NAME_PATTERN.fullmatch(query.strip())
    if match and _looks_like_name(match.group(1)):
        return match.group(1).strip()

    return None


def _match_known_researcher(query: str, heuristics: AuthorHeuristics) -> Optional[str]:
    query_lower = query.lower()
    for name_lower, canonical in heuristics.known_researchers.items():
        if name_lower not in query_lower:
            continue

        # Recover the spelling used in the query, e.g. "geoffrey HINTON"
        name_regex = r"\s+".join(
            rf"[A-Z][a-z]*{re.escape(part[1:])}" for part in name_lower.split()
        )
        match = re.search(f"({name_regex})", query, re.IGNORECASE)
        if match:
            return _capitalize_name(match.group(1))
        return canonical
    return None


def _match_short_name(query: str, heuristics: AuthorHeuristics) -> Optional[str]:
    if len(query.split()) > MAX_HEURISTIC_TOKENS:
        return None
    match = LEADING_NAME_PATTERN.match(query.strip())
    if not match or not _looks_like_name(match.group(1)):
        return None
    if heuristics.contains_common_term(query):
        return None
    return match.group(1).strip()


def detect_author_query(query: str, heuristics: Optional[AuthorHeuristics] = None) -> AuthorDetectionResult:
    """
    Classify a query as author-targeted or topical.

    Args:
        query: Raw user query
        heuristics: Lookup tables; defaults to the configured JSON file

    Returns:
        AuthorDetectionResult with the extracted author name, if any
    """
    heuristics = heuristics or get_heuristics()
    if not query or not query.strip():
        return AuthorDetectionResult(is_author_query=False)

    for matcher in (_match_explicit_patterns, _match_known_researcher, _match_short_name):
        author_name = matcher(query, heuristics)
        if author_name:
            logger.debug(f"Detected author query via {matcher.__name__}: {author_name}")
            return AuthorDetectionResult(is_author_query=True, author_name=author_name)

    return AuthorDetectionResult(is_author_query=False)
