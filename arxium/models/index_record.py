from pydantic import BaseModel
from typing import Any, Dict, List


class IndexVector(BaseModel):
    """A vector to upsert into the semantic index"""
    id: str
    values: List[float]
    metadata: Dict[str, Any] = {}


class IndexMatch(BaseModel):
    """A ranked semantic index match; higher score means more similar"""
    id: str
    score: float
    metadata: Dict[str, Any] = {}
