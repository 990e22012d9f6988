# tests/unit/pipeline/conftest.py
"""Shared fixtures for pipeline unit tests."""

from typing import Dict, List

import pytest

from hybrid_rag.documents import Chunk, Document
from hybrid_rag.retrieval.engine import RetrievalResult

SHIPPING_PLAN = (
    '{"strategy":"baseline","steps":[{"id":"step-1","goal":"Check shipping policy",'
    '"questions":["shipping policy details"],"expected_evidence":"official policy"}]}'
)


class StubEngine:
    """Retrieval engine returning fixed results per query (or for every query)."""

    def __init__(self, results=None, by_query: Dict[str, List[RetrievalResult]] = None):
        self.results = results or []
        self.by_query = by_query or {}
        self.docs: Dict[str, Document] = {}
        self.queries: List[str] = []

    def index_documents(self, *docs: Document) -> None:
        for doc in docs:
            self.docs[doc.id] = doc

    def search(self, query: str) -> List[RetrievalResult]:
        self.queries.append(query)
        return list(self.by_query.get(query, self.results))

    def document(self, document_id: str):
        return self.docs.get(document_id)

    def clear(self) -> None:
        self.docs.clear()

    def count(self) -> int:
        return len(self.docs)


@pytest.fixture
def shipping_plan():
    return SHIPPING_PLAN


@pytest.fixture
def stub_engine():
    return StubEngine


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
def aaddcc_doc():
    return Document(
        id="aaddcc",
        title="AADDCC",
        content="# AADDCC\n\nAADDCC 是一种万能药物，可以治疗任何疾病。但是吃多了会让人精神异常，呆滞。",
    )


@pytest.fixture
def aaddcc_chunks(aaddcc_doc):
    return [
        Chunk(id="aaddcc_chunk_1", document_id=aaddcc_doc.id, content="# AADDCC"),
        Chunk(
            id="aaddcc_chunk_2",
            document_id=aaddcc_doc.id,
            content="AADDCC 是一种万能药物，可以治疗任何疾病。但是吃多了会让人精神异常，呆滞。",
        ),
    ]
