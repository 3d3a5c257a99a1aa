"""Shared pytest configuration and fixtures for arxium tests.

Nothing here touches the network: arXiv, Ollama and Zilliz are replaced by
small fakes that record what they were asked to do.
"""

import os

# Must be set before arxium.config is imported anywhere
os.environ.setdefault("HISTORY_STORE", "memory")
os.environ.setdefault("SEMANTIC_INDEX", "none")

from typing import Dict, List, Optional

import pytest
import requests

from arxium.data.chat_history import InMemoryChatHistoryStore
from arxium.errors import UpstreamError
from arxium.models import ExternalPaper
from arxium.rag.rag_engine import RAGEngine


# ── Mock Response Data ────────────────────────────────────────────────────────

ARXIV_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title type="html">ArXiv Query: search_query=attention</title>
  <entry>
    <id>http://arxiv.org/abs/1706.03762v7</id>
    <published>2017-06-12T17:57:34Z</published>
    <title>Attention Is All
      You Need</title>
    <summary>  The dominant sequence transduction models are based on complex
  recurrent or convolutional neural networks &amp; attention.
    </summary>
    <author><name>Ashish Vaswani</name></author>
    <author><name>Noam Shazeer</name></author>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/2401.00001v1</id>
    <published>2024-01-01T00:00:00Z</published>
    <title>An Entry Without Abstract</title>
    <author><name>Nobody Known</name></author>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/1810.04805v2</id>
    <published>2018-10-11T00:00:00Z</published>
    <title>BERT: Pre-training of Deep Bidirectional Transformers</title>
    <summary>We introduce a new language representation model called BERT.</summary>
    <author><name>Jacob Devlin</name></author>
    <author><name>Geoffrey E. Hinton</name></author>
  </entry>
</feed>
"""

EMPTY_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"></feed>
"""


# ── Fakes ─────────────────────────────────────────────────────────────────────

class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", json_data=None, reason: str = "OK",
                 json_error: Optional[Exception] = None):
        self.status_code = status_code
        self.text = text
        self.reason = reason
        self._json_data = json_data
        self._json_error = json_error

    def json(self):
        if self._json_error:
            raise self._json_error
        return self._json_data


class FakeSession:
    """Stand-in for requests.Session that replays one response and records calls."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response or FakeResponse()
        self.error = error
        self.headers: Dict[str, str] = {}
        self.calls: List[dict] = []

    def _call(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._call("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._call("POST", url, **kwargs)


class FakeEmbedder:
    """
    Deterministic embedder: texts listed in ``vectors`` get that vector,
    everything else gets ``default``.
    """

    model_name = "fake-embed"

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None,
                 default: Optional[List[float]] = None, fail: bool = False):
        self.vectors = vectors or {}
        self.default = default or [0.0, 0.0, 1.0]
        self.fail = fail
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.fail:
            raise UpstreamError("Embedding", "service unavailable", 503)
        return self.vectors.get(text, self.default)


class FakeLLM:
    model_name = "fake-llm"

    def __init__(self, answer: str = "Transformers rely on attention.", fail: bool = False):
        self.answer = answer
        self.fail = fail
        self.calls: List[dict] = []

    def generate(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt, "max_tokens": max_tokens})
        if self.fail:
            raise UpstreamError("LLM", "model crashed", 500)
        return self.answer


class FakeSearcher:
    def __init__(self, papers: Optional[List[ExternalPaper]] = None, error: Optional[Exception] = None):
        self.papers = papers or []
        self.error = error
        self.queries: List[str] = []

    def search(self, query: str, max_results: int = 10) -> List[ExternalPaper]:
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.papers[:max_results]


class RecordingQueue:
    """Background queue that records jobs instead of running them; run_all() drains it."""

    def __init__(self):
        self.jobs: List[tuple] = []
        self.closed = False

    def submit(self, fn, *args, description: str = "task", **kwargs):
        self.jobs.append((fn, args, kwargs, description))
        return None

    def run_all(self) -> list:
        results = [fn(*args, **kwargs) for fn, args, kwargs, _ in self.jobs]
        self.jobs = []
        return results

    def shutdown(self, wait: bool = True) -> None:
        self.closed = True


class FailingIndex:
    """Semantic index whose every operation blows up."""

    name = "failing"

    def upsert(self, vectors):
        raise ConnectionError("index unreachable")

    def query(self, vector, top_k=3, return_metadata=True):
        raise ConnectionError("index unreachable")

    def count(self):
        raise ConnectionError("index unreachable")


class FailingHistoryStore(InMemoryChatHistoryStore):
    name = "failing"

    def get(self, session_id):
        raise OSError("disk gone")

    def append(self, session_id, message):
        raise OSError("disk gone")

    def clear(self, session_id):
        raise OSError("disk gone")


# ── Fixtures ──────────────────────────────────────────────────────────────────

def make_paper(paper_id: str = "1706.03762v7", title: str = "Attention Is All You Need",
               abstract: str = "The Transformer relies entirely on attention.",
               authors: Optional[List[str]] = None) -> ExternalPaper:
    return ExternalPaper(
        id=paper_id,
        title=title,
        authors=authors or ["Ashish Vaswani"],
        abstract=abstract,
        url=f"https://arxiv.org/abs/{paper_id}",
        published="2017-06-12T17:57:34Z",
    )


@pytest.fixture
def paper_factory():
    return make_paper


@pytest.fixture
def request_error():
    return requests.ConnectionError("connection refused")


@pytest.fixture
def recording_queue():
    return RecordingQueue()


@pytest.fixture
def history_store():
    return InMemoryChatHistoryStore()


@pytest.fixture
def engine_factory(history_store, recording_queue):
    """Build a RAGEngine from fakes; keyword arguments override single parts."""

    def _build(**overrides) -> RAGEngine:
        parts = {
            "searcher": FakeSearcher(),
            "embedder": FakeEmbedder(),
            "llm": FakeLLM(),
            "history_store": history_store,
            "index": None,
            "queue": recording_queue,
        }
        parts.update(overrides)
        return RAGEngine(**parts)

    return _build
