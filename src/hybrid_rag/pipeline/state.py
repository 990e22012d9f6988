# src/hybrid_rag/pipeline/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, TypedDict

from hybrid_rag.state import CriticFeedback, Evidence, Plan


class PipelineState(TypedDict, total=False):
    """Per-run graph state. A fresh state is allocated for every run."""

    question: str
    plan: Optional[Plan]
    evidence: List[Evidence]
    draft: str
    critic: Optional[CriticFeedback]
    final_answer: str


@dataclass
class PipelineResponse:
    question: str
    plan: Optional[Plan] = None
    evidence: List[Evidence] = field(default_factory=list)
    draft_answer: str = ""
    final_answer: str = ""
    critic: Optional[CriticFeedback] = None

    @classmethod
    def from_state(cls, state: PipelineState) -> "PipelineResponse":
        return cls(
            question=state.get("question", ""),
            plan=state.get("plan"),
            evidence=list(state.get("evidence") or []),
            draft_answer=state.get("draft", ""),
            final_answer=state.get("final_answer", ""),
            critic=state.get("critic"),
        )

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "plan": self.plan.model_dump() if self.plan is not None else None,
            "evidence": [
                {
                    "step_id": ev.step_id,
                    "query": ev.query,
                    "document_id": ev.document_id,
                    "chunk_id": ev.chunk.id,
                    "score": ev.score,
                    "summary": ev.summary,
                }
                for ev in self.evidence
            ],
            "draft_answer": self.draft_answer,
            "final_answer": self.final_answer,
            "critic": self.critic.model_dump() if self.critic is not None else None,
        }
