"""
Semantic index capability.

Two interchangeable backends implement ``SemanticIndex``:

- ``MilvusIndex`` stores vectors in a Zilliz Cloud / Milvus collection
- ``InMemoryIndex`` keeps them in process and ranks with numpy cosine similarity

``create_semantic_index`` picks one from configuration and returns None when
no index is available, which callers treat as "skip backfill and fallback".
"""

import logging
import threading
from typing import Any, Dict, List, Optional

import numpy as np
from pymilvus import DataType, MilvusClient

from . import config
from .errors import IndexUnavailable
from .models import IndexMatch, IndexVector

logger = logging.getLogger(__name__)

METADATA_FIELDS = ["paper_id", "title", "section", "text", "url"]

# VARCHAR limits of the collection schema
FIELD_MAX_LENGTHS = {
    "id": 512,
    "paper_id": 256,
    "title": 2000,
    "section": 512,
    "text": 8192,
    "url": 512,
}


class SemanticIndex:
    """Interface of a vector similarity index over paper text chunks."""

    name = "abstract"

    def upsert(self, vectors: List[IndexVector]) -> None:
        raise NotImplementedError

    def query(self, vector: List[float], top_k: int = 3, return_metadata: bool = True) -> List[IndexMatch]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError


class InMemoryIndex(SemanticIndex):
    """Process-local index, used for development and tests."""

    name = "memory"

    def __init__(self):
        self._vectors: Dict[str, np.ndarray] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def upsert(self, vectors: List[IndexVector]) -> None:
        with self._lock:
            for vector in vectors:
                self._vectors[vector.id] = np.asarray(vector.values, dtype=float)
                self._metadata[vector.id] = dict(vector.metadata)
        logger.info(f"Upserted {len(vectors)} vectors into in-memory index")

    def query(self, vector: List[float], top_k: int = 3, return_metadata: bool = True) -> List[IndexMatch]:
        with self._lock:
            if not self._vectors:
                return []
            ids = list(self._vectors.keys())
            matrix = np.vstack([self._vectors[vector_id] for vector_id in ids])
            metadata = [self._metadata[vector_id] for vector_id in ids]

        query_vector = np.asarray(vector, dtype=float)
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query_vector)
        # Zero vectors have no direction; score them as unrelated
        similarities = np.divide(
            matrix @ query_vector, norms, out=np.zeros(len(ids)), where=norms > 0
        )

        top_indices = np.argsort(similarities)[::-1][:top_k]
        return [
            IndexMatch(
                id=ids[idx],
                score=float(similarities[idx]),
                metadata=metadata[idx] if return_metadata else {},
            )
            for idx in top_indices
        ]

    def count(self) -> int:
        with self._lock:
            return len(self._vectors)


class MilvusIndex(SemanticIndex):
    """Semantic index stored in a Zilliz Cloud (Milvus) collection with a COSINE HNSW index."""

    name = "milvus"

    def __init__(
        self,
        uri: str = config.ZILLIZ_CLOUD_URI,
        token: str = config.ZILLIZ_CLOUD_TOKEN,
        collection_name: str = config.COLLECTION_NAME,
        embedding_dim: int = config.EMBEDDING_DIM,
        client: Optional[MilvusClient] = None,
    ):
        if client is None and (not uri or not token):
            raise IndexUnavailable("ZILLIZ_CLOUD_URI and ZILLIZ_CLOUD_TOKEN must be set in .env file")

        self.collection_name = collection_name
        self.embedding_dim = embedding_dim
        if client is None:
            logger.info(f"Connecting to Zilliz Cloud at {uri}")
            client = MilvusClient(uri=uri, token=token)
        self.client = client
        self.ensure_collection()

    def ensure_collection(self) -> None:
        """Create the collection with its schema and index if it does not exist yet."""
        if self.client.has_collection(self.collection_name):
            logger.info(f"Found collection '{self.collection_name}'")
            return

        logger.info(f"Creating collection: {self.collection_name}")
        schema = self.client.create_schema(auto_id=False, enable_dynamic_field=False)
        schema.add_field("id", DataType.VARCHAR, is_primary=True, max_length=FIELD_MAX_LENGTHS["id"])
        for field in METADATA_FIELDS:
            schema.add_field(field, DataType.VARCHAR, max_length=FIELD_MAX_LENGTHS[field])
        schema.add_field("embedding", DataType.FLOAT_VECTOR, dim=self.embedding_dim)

        index_params = self.client.prepare_index_params()
        index_params.add_index(
            "embedding", metric_type="COSINE", index_type="HNSW", params={"M": 8, "efConstruction": 64}
        )
        self.client.create_collection(
            collection_name=self.collection_name,
            schema=schema,
            index_params=index_params,
        )

    @staticmethod
    def _to_row(vector: IndexVector) -> Dict[str, Any]:
        row = {"id": vector.id[:FIELD_MAX_LENGTHS["id"]], "embedding": vector.values}
        for field in METADATA_FIELDS:
            value = str(vector.metadata.get(field) or "")
            row[field] = value[:FIELD_MAX_LENGTHS[field]]
        return row

    def upsert(self, vectors: List[IndexVector]) -> None:
        if not vectors:
            return
        try:
            self.client.upsert(
                collection_name=self.collection_name,
                data=[self._to_row(vector) for vector in vectors],
            )
        except Exception as e:
            raise IndexUnavailable(f"Failed to upsert vectors into '{self.collection_name}': {e}") from e
        logger.info(f"Upserted {len(vectors)} vectors into '{self.collection_name}'")

    def query(self, vector: List[float], top_k: int = 3, return_metadata: bool = True) -> List[IndexMatch]:
        try:
            results = self.client.search(
                collection_name=self.collection_name,
                data=[vector],
                anns_field="embedding",
                search_params={"metric_type": "COSINE", "params": {"ef": 64}},
                limit=top_k,
                output_fields=METADATA_FIELDS if return_metadata else [],
            )
        except Exception as e:
            raise IndexUnavailable(f"Search in '{self.collection_name}' failed: {e}") from e

        matches = []
        for hits in results:
            for hit in hits:
                # With the COSINE metric Milvus reports similarity as "distance"
                entity = hit.get("entity") or {}
                matches.append(IndexMatch(
                    id=str(hit["id"]),
                    score=float(hit["distance"]),
                    metadata={field: entity.get(field, "") for field in METADATA_FIELDS} if return_metadata else {},
                ))
        return matches

    def count(self) -> int:
        try:
            return int(self.client.get_collection_stats(self.collection_name)["row_count"])
        except Exception as e:
            raise IndexUnavailable(f"Failed to read stats of '{self.collection_name}': {e}") from e


def create_semantic_index(kind: str = config.SEMANTIC_INDEX) -> Optional[SemanticIndex]:
    """
    Build the configured semantic index.

    Returns:
        The index, or None when disabled or unreachable
    """
    if kind == "memory":
        return InMemoryIndex()
    if kind == "milvus":
        try:
            return MilvusIndex()
        except IndexUnavailable as e:
            logger.warning(f"Semantic index disabled: {e.user_message}")
        except Exception as e:
            logger.error(f"Failed to connect to Zilliz Cloud: {e}")
        return None
    if kind != "none":
        logger.warning(f"Unknown SEMANTIC_INDEX value '{kind}', semantic index disabled")
    return None
