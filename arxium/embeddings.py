import logging
import requests
import tiktoken
from typing import List, Optional

from . import config
from .errors import UpstreamError

logger = logging.getLogger(__name__)


class OllamaEmbedder:
    """
    Embedding capability backed by the Ollama embeddings API.

    The response contract is ``{"embedding": [float, ...]}``; anything else is
    treated as an upstream failure.
    """

    def __init__(
        self,
        model_name: str = config.EMBEDDING_MODEL,
        ollama_url: str = config.OLLAMA_URL,
        max_tokens: int = config.EMBEDDING_MAX_TOKENS,
        timeout: float = config.EMBEDDING_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.model_name = model_name
        self.embeddings_url = f"{ollama_url.rstrip('/')}/api/embeddings"
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.session = session or requests.Session()
        self._encoding = None
        logger.info(f"Embedder initialized with model: {model_name}")

    def truncate(self, text: str) -> str:
        """
        Truncate text to the embedding model's token budget using tiktoken.

        Args:
            text: Text to truncate

        Returns:
            The text, cut to at most max_tokens cl100k_base tokens
        """
        if not self.max_tokens:
            return text
        if self._encoding is None:
            # The cl100k_base tokenizer approximates most embedding models well enough
            self._encoding = tiktoken.get_encoding("cl100k_base")

        tokens = self._encoding.encode(text)
        if len(tokens) <= self.max_tokens:
            return text
        logger.info(f"Truncating text from {len(tokens)} to {self.max_tokens} tokens")
        return self._encoding.decode(tokens[:self.max_tokens])

    def embed(self, text: str) -> List[float]:
        """
        Generate an embedding vector for a piece of text.

        Raises:
            UpstreamError: on connection failure, non-2xx status or a missing vector
        """
        processed_text = self.truncate(text)
        try:
            response = self.session.post(
                self.embeddings_url,
                json={"model": self.model_name, "prompt": processed_text},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamError("Embedding", str(e)) from e

        if not 200 <= response.status_code < 300:
            raise UpstreamError("Embedding", response.text[:200], response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Embedding", f"invalid JSON response: {e}") from e

        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not isinstance(embedding, list) or not embedding:
            raise UpstreamError("Embedding", "response did not contain an embedding")
        if not all(isinstance(value, (int, float)) and not isinstance(value, bool) for value in embedding):
            raise UpstreamError("Embedding", "embedding contains non-numeric values")

        logger.debug(f"Generated embedding with dimension: {len(embedding)}")
        return embedding
