"""
Exceptions raised by the arxium pipeline.

Routes translate these into structured ``{error, message}`` responses;
anything not listed here is degraded to reduced context inside the engine.
"""
from typing import Optional


class ArxiumError(RuntimeError):
    """Base class for errors that carry a message safe to show to the user."""

    def __init__(self, user_message: str, *, internal_message: Optional[str] = None):
        super().__init__(internal_message or user_message)
        self.user_message = user_message


class UpstreamError(ArxiumError):
    """An external service (arXiv, embeddings, LLM) failed or returned a non-2xx status."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        detail = f"{service} error: {status_code} {message}" if status_code else f"{service} error: {message}"
        super().__init__(detail)
        self.service = service
        self.status_code = status_code


class IndexUnavailable(ArxiumError):
    """The semantic index is not configured or one of its calls failed."""


class NoContextFound(ArxiumError):
    """Neither arXiv nor the semantic index produced a single context chunk."""

    def __init__(self, query: str):
        super().__init__(
            "Could not find any relevant papers. Please try a different query.",
            internal_message=f"No context chunks for query: {query!r}",
        )
        self.query = query


class HistoryStoreError(ArxiumError):
    """Reading or writing a session's chat history failed."""
