import logging
import requests
from typing import Optional

from . import config
from .errors import UpstreamError

logger = logging.getLogger(__name__)


class LLMProcessor:
    """
    Generation capability backed by the Ollama chat API.

    Sends a system and a user message and returns the assistant's text. The
    response contract is ``{"message": {"content": str}}``.
    """

    def __init__(
        self,
        model_name: str = config.LLM_MODEL,
        ollama_url: str = config.OLLAMA_URL,
        temperature: float = config.LLM_TEMPERATURE,
        timeout: float = config.LLM_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the LLM processor with model settings"""
        self.model_name = model_name
        self.chat_url = f"{ollama_url.rstrip('/')}/api/chat"
        self.temperature = temperature
        self.timeout = timeout
        self.session = session or requests.Session()
        logger.info(f"LLM Processor initialized with model: {model_name}")

    def generate(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        """
        Call the language model with a system and a user prompt

        Args:
            system_prompt: Behavioral instructions
            user_prompt: Context, conversation and question
            max_tokens: Generation budget (num_predict)

        Returns:
            The generated answer text

        Raises:
            UpstreamError: on connection failure, non-2xx status or an empty answer
        """
        payload = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "stream": False,
            "options": {
                "temperature": self.temperature,  # Low temperature for more factual responses
                "num_predict": max_tokens,
            },
        }

        logger.info(f"Sending prompt to LLM (length: {len(system_prompt) + len(user_prompt)}, max_tokens: {max_tokens})")
        try:
            response = self.session.post(self.chat_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError("LLM", str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Error from Ollama API: {response.status_code}, {response.text}")
            raise UpstreamError("LLM", response.text[:200], response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("LLM", f"invalid JSON response: {e}") from e

        message = data.get("message") if isinstance(data, dict) else None
        answer = message.get("content") if isinstance(message, dict) else None
        if not isinstance(answer, str) or not answer.strip():
            raise UpstreamError("LLM", "empty response from language model")
        return answer.strip()
