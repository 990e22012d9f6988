# src/hybrid_rag/pipeline/nodes/critic.py
from __future__ import annotations

from typing import Any, Dict, Optional

from hybrid_rag.agents.critic import Critic
from hybrid_rag.pipeline.state import PipelineState
from hybrid_rag.utils import observe, with_node_logging

RUN = "run"
SKIP = "skip"


def make_critic_gate(critic: Optional[Critic]):
    """Router after synthesis: 'run' the critic when one is configured, else 'skip' to end."""

    def critic_gate(state: PipelineState) -> str:
        return RUN if critic is not None else SKIP

    return critic_gate


def make_critic_node(critic: Critic):
    @observe
    @with_node_logging("critic")
    def review(state: PipelineState) -> Dict[str, Any]:
        feedback = critic.review(
            state["question"],
            state.get("draft", ""),
            state.get("plan"),
            state.get("evidence") or [],
        )
        return {"critic": feedback}

    return review
