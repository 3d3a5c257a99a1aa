#!/usr/bin/env python3
"""
Seed the semantic index with the bundled corpus of landmark ML papers.

Used by POST /api/setup and runnable on its own:

    python -m arxium.seed_index --seed-file arxium/data/seed_papers.json
"""
import argparse
import json
import logging
import re
import sys
from typing import Dict, List, Optional

from . import config
from .embeddings import OllamaEmbedder
from .errors import IndexUnavailable
from .models import IndexVector, SeedPaper
from .vector_index import SemanticIndex, create_semantic_index

logger = logging.getLogger(__name__)


def load_seed_papers(path: str = config.SEED_PAPERS_FILE) -> List[SeedPaper]:
    """Load the seed corpus from a JSON array of papers"""
    with open(path, "r", encoding="utf-8") as f:
        papers = json.load(f)
    if not isinstance(papers, list):
        raise ValueError(f"Expected JSON array in {path} but got {type(papers).__name__}")
    return [SeedPaper(**paper) for paper in papers]


def seed_vector_id(paper_id: str, section: str) -> str:
    """Vector id of a seed chunk, e.g. "bert-3-1--Pre-training-BERT" """
    return f"{paper_id}-{re.sub(r'[^a-zA-Z0-9]', '-', section)}"


class SeedIndexer:
    """Embeds every chunk of the seed corpus and upserts it into the semantic index."""

    def __init__(
        self,
        index: Optional[SemanticIndex],
        embedder: OllamaEmbedder,
        papers: Optional[List[SeedPaper]] = None,
        seed_file: str = config.SEED_PAPERS_FILE,
    ):
        self.index = index
        self.embedder = embedder
        self._papers = papers
        self.seed_file = seed_file

    @property
    def papers(self) -> List[SeedPaper]:
        if self._papers is None:
            self._papers = load_seed_papers(self.seed_file)
        return self._papers

    def build_vectors(self) -> List[IndexVector]:
        """
        Embed each seed chunk.

        Raises:
            UpstreamError: when the embedding service fails
        """
        vectors = []
        for paper in self.papers:
            logger.info(f"Embedding {len(paper.chunks)} chunks of '{paper.title}'")
            for chunk in paper.chunks:
                vectors.append(IndexVector(
                    id=seed_vector_id(paper.id, chunk.section),
                    values=self.embedder.embed(chunk.text),
                    metadata={
                        "paper_id": paper.id,
                        "title": paper.title,
                        "section": chunk.section,
                        "text": chunk.text,
                        "url": paper.url,
                    },
                ))
        return vectors

    def run(self) -> Dict[str, int]:
        """
        Seed the index.

        Returns:
            {"papers_loaded": ..., "vectors_created": ...}

        Raises:
            IndexUnavailable: when no index is configured or the upsert fails
        """
        if self.index is None:
            raise IndexUnavailable(
                "Semantic index is not configured. Set SEMANTIC_INDEX and the Zilliz Cloud "
                "credentials (ZILLIZ_CLOUD_URI, ZILLIZ_CLOUD_TOKEN) in the .env file."
            )

        vectors = self.build_vectors()
        try:
            self.index.upsert(vectors)
        except IndexUnavailable:
            raise
        except Exception as e:
            raise IndexUnavailable(f"Failed to store vectors in the semantic index: {e}") from e

        logger.info(f"Seeded {len(vectors)} vectors from {len(self.papers)} papers")
        return {"papers_loaded": len(self.papers), "vectors_created": len(vectors)}


def main():
    """Parse command line arguments and seed the configured index."""
    parser = argparse.ArgumentParser(description="Embed the seed papers and upsert them into the semantic index")
    parser.add_argument("--seed-file", default=config.SEED_PAPERS_FILE, help="JSON array of seed papers")
    parser.add_argument("--index", default=config.SEMANTIC_INDEX, choices=["milvus", "memory"],
                        help="Semantic index backend to seed")
    args = parser.parse_args()

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")

    indexer = SeedIndexer(create_semantic_index(args.index), OllamaEmbedder(), seed_file=args.seed_file)
    try:
        result = indexer.run()
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)
    logger.info(f"Setup complete: {result}")


if __name__ == "__main__":
    main()
