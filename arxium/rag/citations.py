from typing import Iterable, List

from ..models import Citation, ContextChunk


def reduce_citations(chunks: Iterable[ContextChunk]) -> List[Citation]:
    """
    Project context chunks to citations, one per paper.

    The first chunk seen for a paper_id supplies the citation fields, and
    citations keep first-seen order.
    """
    citations = {}
    for chunk in chunks:
        if chunk.paper_id not in citations:
            citations[chunk.paper_id] = chunk.to_citation()
    return list(citations.values())
