# src/hybrid_rag/retrieval/vectors.py
"""Vector math, the vector store contract, an in-memory store and the embedding adapter."""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Protocol, Sequence, Tuple

from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)

DEFAULT_STORE_TOP_K = 10


@dataclass
class Embedding:
    id: str
    vector: List[float]
    text: str = ""
    metadata: Dict[str, str] = field(default_factory=dict)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity; 0.0 for empty or mismatched vectors."""
    if not a or not b or len(a) != len(b):
        return 0.0
    dot = norm_a = norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b) + 1e-8)


def normalize(vector: Sequence[float]) -> List[float]:
    norm = math.sqrt(sum(x * x for x in vector))
    if norm == 0:
        return list(vector)
    return [x / norm for x in vector]


class VectorStore(Protocol):
    def add_embedding(self, embedding: Embedding) -> None: ...

    def search(self, vector: Sequence[float], top_k: int) -> List[Tuple[Embedding, float]]: ...

    def delete_embedding(self, embedding_id: str) -> None: ...

    def get_embedding(self, embedding_id: str) -> Embedding: ...

    def clear(self) -> None: ...

    def count(self) -> int: ...


class InMemoryVectorStore:
    """Thread-safe brute-force cosine store."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._items: Dict[str, Embedding] = {}

    def add_embedding(self, embedding: Embedding) -> None:
        if not embedding.id:
            raise ValueError("embedding id cannot be empty")
        if not embedding.vector:
            raise ValueError(f"embedding {embedding.id} has an empty vector")
        with self._lock:
            self._items[embedding.id] = embedding

    def search(self, vector: Sequence[float], top_k: int) -> List[Tuple[Embedding, float]]:
        if not vector:
            raise ValueError("query vector cannot be empty")
        if top_k <= 0:
            top_k = DEFAULT_STORE_TOP_K
        with self._lock:
            items = list(self._items.values())

        scored = [(emb, cosine_similarity(vector, emb.vector)) for emb in items if len(emb.vector) == len(vector)]
        scored.sort(key=lambda pair: (-pair[1], pair[0].id))
        return scored[:top_k]

    def delete_embedding(self, embedding_id: str) -> None:
        with self._lock:
            if embedding_id not in self._items:
                raise KeyError(f"embedding not found: {embedding_id}")
            del self._items[embedding_id]

    def get_embedding(self, embedding_id: str) -> Embedding:
        with self._lock:
            try:
                return self._items[embedding_id]
            except KeyError:
                raise KeyError(f"embedding not found: {embedding_id}") from None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def count(self) -> int:
        with self._lock:
            return len(self._items)


class EmbeddingAdapter:
    """Wraps a LangChain Embeddings provider, optionally L2-normalizing its output."""

    def __init__(self, embeddings: Embeddings, normalize_vectors: bool = False):
        self.embeddings = embeddings
        self.normalize_vectors = normalize_vectors

    def _post(self, vector: Sequence[float]) -> List[float]:
        vec = [float(x) for x in vector]
        return normalize(vec) if self.normalize_vectors else vec

    def embed_query(self, text: str) -> List[float]:
        return self._post(self.embeddings.embed_query(text))

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        vectors = self.embeddings.embed_documents(texts)
        if len(vectors) != len(texts):
            raise ValueError(f"embedder returned {len(vectors)} vectors for {len(texts)} texts")
        return [self._post(v) for v in vectors]
