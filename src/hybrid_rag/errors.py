# src/hybrid_rag/errors.py
"""Exception types raised by the retrieval engine and the agent pipeline."""

from __future__ import annotations

from typing import Optional


class HybridRAGError(Exception):
    """Base class for every error raised by hybrid_rag."""


class ConfigurationError(HybridRAGError):
    """A required collaborator is missing or options contradict each other."""


class RetrievalError(HybridRAGError):
    """Embedding, chunking or vector store failure.

    Retrieval failures are never retried; they abort the current operation.
    """

    def __init__(self, message: str, *, document_id: Optional[str] = None, chunk_id: Optional[str] = None):
        super().__init__(message)
        self.document_id = document_id
        self.chunk_id = chunk_id


class GenerationError(HybridRAGError):
    """A language model call failed."""


class PlanningError(GenerationError):
    """The planner output could not be decoded or contained no steps."""


class GraphExecutionError(HybridRAGError):
    """The orchestration graph exceeded its visit budget."""
