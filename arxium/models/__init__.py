# Import all models
from .paper import ExternalPaper, SeedChunk, SeedPaper
from .context_chunk import ContextChunk, Citation
from .chat_message import ChatMessage, ResponseLength
from .author_detection import AuthorDetectionResult
from .prompt import Prompt
from .index_record import IndexVector, IndexMatch
from .query_request import QueryRequest
from .query_response import QueryResponse

# Export all models
__all__ = [
    'ExternalPaper',
    'SeedChunk',
    'SeedPaper',
    'ContextChunk',
    'Citation',
    'ChatMessage',
    'ResponseLength',
    'AuthorDetectionResult',
    'Prompt',
    'IndexVector',
    'IndexMatch',
    'QueryRequest',
    'QueryResponse'
]
