from pydantic import BaseModel
from typing import Optional


class AuthorDetectionResult(BaseModel):
    """Whether a query targets a specific author, and which one"""
    is_author_query: bool = False
    author_name: Optional[str] = None
