from pydantic import BaseModel


class ContextChunk(BaseModel):
    """
    One unit of grounding evidence shown to the language model.
    Several chunks may share a paper_id when they come from the semantic index.
    """
    text: str
    title: str
    section: str
    paper_id: str
    url: str = ""

    def to_citation(self) -> "Citation":
        return Citation(
            paper_id=self.paper_id,
            title=self.title,
            section=self.section,
            url=self.url,
        )


class Citation(BaseModel):
    """Citation reference to a paper, unique by paper_id in a response"""
    paper_id: str
    title: str
    section: str
    url: str = ""
