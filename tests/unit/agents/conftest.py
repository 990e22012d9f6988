# tests/unit/agents/conftest.py
"""Shared fixtures for agent unit tests."""

import pytest

from hybrid_rag.documents import Chunk, Document
from hybrid_rag.state import Evidence, Plan, PlanStep


@pytest.fixture
def sample_step():
    return PlanStep(
        id="step-1",
        goal="Check shipping policy",
        questions=["shipping policy details"],
        expected_evidence="official policy",
    )


@pytest.fixture
def sample_plan(sample_step):
    return Plan(strategy="baseline", steps=[sample_step])


@pytest.fixture
def sample_evidence():
    doc = Document(id="shipping-policy", title="Shipping Policy", content="All shipping policy details.")
    chunk = Chunk(id="shipping-policy_chunk_1", document_id=doc.id, content="All shipping policy details.")
    return [
        Evidence(
            step_id="step-1",
            query="shipping policy details",
            chunk=chunk,
            document=doc,
            score=0.8165,
            summary=chunk.content,
        )
    ]
