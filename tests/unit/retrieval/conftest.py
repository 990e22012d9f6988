# tests/unit/retrieval/conftest.py
"""Shared fixtures for retrieval unit tests."""

import pytest

from hybrid_rag.config import ChunkingConfig, RetrievalConfig
from hybrid_rag.documents import Chunk, Document
from hybrid_rag.retrieval.engine import HybridRetrievalEngine
from hybrid_rag.retrieval.vectors import InMemoryVectorStore


@pytest.fixture
def make_chunk():
    def _make(chunk_id: str, content: str, document_id: str = "doc1", **metadata) -> Chunk:
        return Chunk(id=chunk_id, document_id=document_id, content=content, metadata=dict(metadata))

    return _make


@pytest.fixture
def policy_docs():
    return [
        Document(
            id="shipping-policy",
            title="Shipping Policy",
            content="All shipping policy details and timelines.",
            metadata={"source": "intranet"},
        ),
        Document(
            id="returns",
            title="Return Policy",
            content="Return windows and shipping labels.",
            metadata={"source": "help_center"},
        ),
    ]


@pytest.fixture
def fine_chunking():
    """Chunking that keeps headings and tiny paragraphs as separate chunks."""
    return ChunkingConfig(max_tokens=50, overlap_tokens=5, min_tokens=0, min_section_tokens=0)


@pytest.fixture
def make_engine(keyword_embeddings, fine_chunking):
    def _make(**retrieval_kwargs) -> HybridRetrievalEngine:
        return HybridRetrievalEngine(
            InMemoryVectorStore(),
            keyword_embeddings,
            retrieval=RetrievalConfig(**retrieval_kwargs),
            chunking=fine_chunking,
        )

    return _make
