from pydantic import BaseModel
from typing import List
from .context_chunk import Citation


class QueryResponse(BaseModel):
    """
    Model representing an answer to a paper query.
    Contains the generated answer and one citation per distinct paper.
    """
    answer: str
    citations: List[Citation]
    session_id: str
