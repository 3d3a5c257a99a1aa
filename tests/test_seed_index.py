"""Tests for arxium.seed_index: seeding the semantic index with the bundled corpus."""

import json

import pytest

from arxium.errors import IndexUnavailable
from arxium.seed_index import SeedIndexer, load_seed_papers, seed_vector_id
from arxium.vector_index import InMemoryIndex

from conftest import FailingIndex, FakeEmbedder


class TestSeedCorpus:
    def test_bundled_corpus(self):
        papers = load_seed_papers()
        assert len(papers) == 5
        assert sum(len(p.chunks) for p in papers) == 16
        assert papers[0].id == "attention-is-all-you-need"

    def test_non_array_is_rejected(self, tmp_path):
        path = tmp_path / "seed.json"
        path.write_text(json.dumps({"id": "x"}))
        with pytest.raises(ValueError):
            load_seed_papers(str(path))

    @pytest.mark.parametrize("section,expected", [
        ("Abstract", "bert-Abstract"),
        ("3.1: Pre-training BERT", "bert-3-1--Pre-training-BERT"),
    ])
    def test_vector_id(self, section, expected):
        assert seed_vector_id("bert", section) == expected


class TestSeedIndexer:
    def test_seeds_every_chunk(self):
        index = InMemoryIndex()
        embedder = FakeEmbedder()

        result = SeedIndexer(index, embedder).run()

        assert result == {"papers_loaded": 5, "vectors_created": 16}
        assert index.count() == 16
        assert len(embedder.calls) == 16

    def test_metadata(self):
        index = InMemoryIndex()
        SeedIndexer(index, FakeEmbedder()).run()
        match = index.query([0.0, 0.0, 1.0], top_k=16)[0]
        assert set(match.metadata) == {"paper_id", "title", "section", "text", "url"}

    def test_rerun_is_idempotent(self):
        index = InMemoryIndex()
        SeedIndexer(index, FakeEmbedder()).run()
        SeedIndexer(index, FakeEmbedder()).run()
        assert index.count() == 16

    def test_no_index(self):
        with pytest.raises(IndexUnavailable):
            SeedIndexer(None, FakeEmbedder()).run()

    def test_upsert_failure(self):
        with pytest.raises(IndexUnavailable):
            SeedIndexer(FailingIndex(), FakeEmbedder()).run()
