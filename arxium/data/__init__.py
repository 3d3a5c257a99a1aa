from .chat_history import (
    ChatHistoryStore,
    InMemoryChatHistoryStore,
    JsonFileChatHistoryStore,
    create_history_store,
)

__all__ = [
    'ChatHistoryStore',
    'InMemoryChatHistoryStore',
    'JsonFileChatHistoryStore',
    'create_history_store'
]
