from pydantic import BaseModel, Field
from typing import List


class ExternalPaper(BaseModel):
    """
    A paper returned by the external arXiv search.
    Only records with an id, a title and an abstract are ever constructed.
    """
    id: str = Field(..., min_length=1, description="arXiv identifier, e.g. 1706.03762v7")
    title: str = Field(..., min_length=1)
    authors: List[str] = []
    abstract: str = Field(..., min_length=1)
    url: str = ""
    published: str = ""


class SeedChunk(BaseModel):
    """One section excerpt of a seed paper"""
    section: str
    text: str


class SeedPaper(BaseModel):
    """
    A paper from the static seed corpus loaded into the semantic index by /api/setup.
    """
    id: str
    title: str
    authors: List[str] = []
    url: str = ""
    chunks: List[SeedChunk] = []
