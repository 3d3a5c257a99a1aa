import hashlib
import json
import logging
import os
import threading
from typing import Dict, List

from .. import config
from ..errors import HistoryStoreError
from ..models import ChatMessage

logger = logging.getLogger(__name__)


class ChatHistoryStore:
    """
    Append-only chat log per session.

    A session's log is created lazily on first access; messages keep
    insertion order and are only ever appended or cleared in bulk.
    """

    name = "abstract"

    def get(self, session_id: str) -> List[ChatMessage]:
        raise NotImplementedError

    def append(self, session_id: str, message: ChatMessage) -> None:
        raise NotImplementedError

    def clear(self, session_id: str) -> None:
        raise NotImplementedError


class InMemoryChatHistoryStore(ChatHistoryStore):
    """Chat history kept in process memory; lost on restart"""

    name = "memory"

    def __init__(self):
        self._sessions: Dict[str, List[ChatMessage]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> List[ChatMessage]:
        with self._lock:
            return list(self._sessions.get(session_id, []))

    def append(self, session_id: str, message: ChatMessage) -> None:
        with self._lock:
            self._sessions.setdefault(session_id, []).append(message)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)


class JsonFileChatHistoryStore(ChatHistoryStore):
    """
    Chat history persisted as one JSON file per session.

    File names are the sha1 of the session id, so arbitrary client supplied
    ids never reach the filesystem as paths.
    """

    name = "file"

    def __init__(self, history_dir: str = config.HISTORY_DIR):
        self.history_dir = history_dir
        self._lock = threading.Lock()
        os.makedirs(self.history_dir, exist_ok=True)

    def _session_file(self, session_id: str) -> str:
        digest = hashlib.sha1(session_id.encode("utf-8")).hexdigest()
        return os.path.join(self.history_dir, f"{digest}.json")

    def _load(self, session_id: str) -> List[ChatMessage]:
        path = self._session_file(session_id)
        if not os.path.exists(path):
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise HistoryStoreError(f"Failed to read history for session {session_id}: {e}") from e
        return [ChatMessage(**message) for message in data.get("messages", [])]

    def _save(self, session_id: str, messages: List[ChatMessage]) -> None:
        path = self._session_file(session_id)
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(
                    {"session_id": session_id, "messages": [m.model_dump() for m in messages]},
                    f,
                    indent=2,
                    ensure_ascii=False,
                )
            os.replace(tmp_path, path)
        except OSError as e:
            raise HistoryStoreError(f"Failed to save history for session {session_id}: {e}") from e

    def get(self, session_id: str) -> List[ChatMessage]:
        with self._lock:
            return self._load(session_id)

    def append(self, session_id: str, message: ChatMessage) -> None:
        with self._lock:
            messages = self._load(session_id)
            messages.append(message)
            self._save(session_id, messages)

    def clear(self, session_id: str) -> None:
        path = self._session_file(session_id)
        with self._lock:
            try:
                if os.path.exists(path):
                    os.remove(path)
            except OSError as e:
                raise HistoryStoreError(f"Failed to clear history for session {session_id}: {e}") from e
        logger.info(f"Cleared history for session {session_id}")


def create_history_store(kind: str = config.HISTORY_STORE, history_dir: str = config.HISTORY_DIR) -> ChatHistoryStore:
    """Build the configured chat history store"""
    if kind == "memory":
        return InMemoryChatHistoryStore()
    if kind != "file":
        logger.warning(f"Unknown HISTORY_STORE value '{kind}', using JSON files")
    return JsonFileChatHistoryStore(history_dir)
