"""
Context assembly.

Fresh arXiv results are the primary context. The semantic index is only
consulted when arXiv returned nothing, because indexed chunks may be stale;
a higher index score never displaces an arXiv paper. New arXiv abstracts are
backfilled into the index in the background for future queries.
"""

import logging
import re
from typing import List, Optional

from ..embeddings import OllamaEmbedder
from ..models import ContextChunk, ExternalPaper, IndexVector
from ..vector_index import SemanticIndex
from .background import BackgroundTaskQueue

logger = logging.getLogger(__name__)

ABSTRACT_SECTION = "Abstract"
BACKFILL_CHUNK_WORDS = 300
FALLBACK_TOP_K = 3
FALLBACK_MIN_SCORE = 0.5


def chunk_text(text: str, chunk_size: int = BACKFILL_CHUNK_WORDS) -> List[str]:
    """
    Split text into consecutive chunks of at most chunk_size words.

    Args:
        text: Text to split
        chunk_size: Number of words per chunk

    Returns:
        List of chunks; empty for blank text
    """
    words = re.split(r"\s+", text.strip())
    if not words or words == [""]:
        return []
    return [" ".join(words[i:i + chunk_size]) for i in range(0, len(words), chunk_size)]


class ContextAssembler:
    """
    Builds the ordered list of context chunks for one query.

    Args:
        index: Semantic index, or None when not configured
        embedder: Embedding capability used for backfill and fallback search
        queue: Background queue that runs the backfill
    """

    def __init__(
        self,
        index: Optional[SemanticIndex],
        embedder: OllamaEmbedder,
        queue: BackgroundTaskQueue,
    ):
        self.index = index
        self.embedder = embedder
        self.queue = queue

    def assemble(self, query: str, papers: List[ExternalPaper]) -> List[ContextChunk]:
        """
        Assemble context chunks for a query.

        Args:
            query: Raw user query
            papers: Papers returned by the external search, in rank order

        Returns:
            One abstract chunk per paper, or index fallback chunks when there
            are no papers. An empty list means no context was found.
        """
        context_chunks = [
            ContextChunk(
                text=paper.abstract,
                title=paper.title,
                section=ABSTRACT_SECTION,
                paper_id=paper.id,
                url=paper.url,
            )
            for paper in papers
        ]

        if self.index is None:
            return context_chunks

        if papers:
            self.queue.submit(self.backfill, papers, description=f"backfill {len(papers)} papers")
        else:
            context_chunks.extend(self.search_index(query))

        return context_chunks

    def build_backfill_vectors(self, papers: List[ExternalPaper]) -> List[IndexVector]:
        """Embed every abstract chunk of the given papers; chunks that fail to embed are skipped."""
        vectors = []
        for paper in papers:
            for i, chunk in enumerate(chunk_text(paper.abstract)):
                try:
                    embedding = self.embedder.embed(chunk)
                except Exception as e:
                    logger.error(f"Error embedding chunk {i} of paper {paper.id}: {e}")
                    continue
                vectors.append(IndexVector(
                    id=f"{paper.id}-chunk-{i}",
                    values=embedding,
                    metadata={
                        "paper_id": paper.id,
                        "title": paper.title,
                        "section": f"{ABSTRACT_SECTION} (chunk {i + 1})",
                        "text": chunk,
                        "url": paper.url,
                    },
                ))
        return vectors

    def backfill(self, papers: List[ExternalPaper]) -> int:
        """
        Insert freshly retrieved papers into the semantic index.

        Runs on the background queue. Upsert failures are logged and swallowed.

        Returns:
            Number of vectors upserted
        """
        vectors = self.build_backfill_vectors(papers)
        if not vectors:
            return 0
        try:
            self.index.upsert(vectors)
        except Exception as e:
            logger.error(f"Error upserting vectors: {e}")
            return 0
        logger.info(f"Backfilled {len(vectors)} chunks from {len(papers)} papers into the semantic index")
        return len(vectors)

    def search_index(self, query: str) -> List[ContextChunk]:
        """Fallback search over previously indexed chunks, keeping matches scored above 0.5."""
        try:
            query_embedding = self.embedder.embed(query)
            matches = self.index.query(query_embedding, top_k=FALLBACK_TOP_K, return_metadata=True)
        except Exception as e:
            logger.error(f"Semantic index query error: {e}")
            return []

        chunks = []
        for match in matches:
            if match.score <= FALLBACK_MIN_SCORE:
                continue
            metadata = match.metadata
            if not metadata.get("text") or not metadata.get("paper_id"):
                logger.debug(f"Skipping index match {match.id} without text or paper_id")
                continue
            chunks.append(ContextChunk(
                text=metadata["text"],
                title=metadata.get("title", ""),
                section=metadata.get("section", ""),
                paper_id=metadata["paper_id"],
                url=metadata.get("url", ""),
            ))
        logger.info(f"Semantic index fallback produced {len(chunks)} chunks for query: '{query}'")
        return chunks
