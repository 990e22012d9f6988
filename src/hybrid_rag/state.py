# src/hybrid_rag/state.py
"""Records exchanged between the agents and the pipeline.

Plan, QueryPlan, CriticFeedback and ChunkSummary are the JSON contracts the language model
must produce; Evidence is built by the research node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hybrid_rag.documents import Chunk, Document

SUMMARY_CHARS = 320

Verdict = Literal["approve", "revise"]


def _null_as_empty_str(v):
    return "" if v is None else v


def _null_as_empty_list(v):
    if v is None:
        return []
    if isinstance(v, list):
        return [item for item in v if item is not None]
    return v


class PlanStep(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    goal: str = ""
    questions: List[str] = Field(default_factory=list)
    expected_evidence: str = ""
    downstream_support: str = ""

    @field_validator("id", "goal", "expected_evidence", "downstream_support", mode="before")
    @classmethod
    def _null_strings(cls, v):
        return _null_as_empty_str(v)

    @field_validator("questions", mode="before")
    @classmethod
    def _null_lists(cls, v):
        return _null_as_empty_list(v)


class Plan(BaseModel):
    model_config = ConfigDict(extra="ignore")

    strategy: str = ""
    steps: List[PlanStep] = Field(default_factory=list)

    @field_validator("strategy", mode="before")
    @classmethod
    def _null_strings(cls, v):
        return _null_as_empty_str(v)

    @field_validator("steps", mode="before")
    @classmethod
    def _null_lists(cls, v):
        return _null_as_empty_list(v)


class QueryPlan(BaseModel):
    model_config = ConfigDict(extra="ignore")

    queries: List[str] = Field(default_factory=list)

    @field_validator("queries", mode="before")
    @classmethod
    def _null_lists(cls, v):
        return _null_as_empty_list(v)


class CriticFeedback(BaseModel):
    """Missing or null fields fall back to their defaults."""

    model_config = ConfigDict(extra="ignore")

    verdict: Verdict = "approve"
    issues: List[str] = Field(default_factory=list)
    notes: str = ""
    final_answer: str = ""

    @field_validator("notes", "final_answer", mode="before")
    @classmethod
    def _null_strings(cls, v):
        return _null_as_empty_str(v)

    @field_validator("issues", mode="before")
    @classmethod
    def _null_lists(cls, v):
        return _null_as_empty_list(v)

    @field_validator("verdict", mode="before")
    @classmethod
    def _normalize_verdict(cls, v):
        s = str(v or "").strip().lower()
        return s if s in ("approve", "revise") else "approve"


class ChunkSummary(BaseModel):
    """Summary of one chunk, indexed alongside it as a separate embedding."""

    model_config = ConfigDict(extra="ignore")

    chunk_id: str = ""
    summary: str = ""
    key_points: List[str] = Field(default_factory=list)

    @field_validator("chunk_id", "summary", mode="before")
    @classmethod
    def _null_strings(cls, v):
        return _null_as_empty_str(v)

    @field_validator("key_points", mode="before")
    @classmethod
    def _null_lists(cls, v):
        return _null_as_empty_list(v)


@dataclass
class Evidence:
    step_id: str
    query: str
    chunk: Chunk
    document: Optional[Document]
    score: float
    summary: str = ""

    @property
    def document_id(self) -> str:
        if self.document is not None and self.document.id:
            return self.document.id
        return self.chunk.document_id

    @property
    def title(self) -> str:
        if self.document is not None and self.document.title:
            return self.document.title
        return self.document_id or self.chunk.id


def summarize(text: str, limit: int = SUMMARY_CHARS) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
