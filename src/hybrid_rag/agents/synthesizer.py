# src/hybrid_rag/agents/synthesizer.py
from __future__ import annotations

import logging
from typing import List, Optional

from hybrid_rag.agents.llm import build_prompt, invoke_text
from hybrid_rag.agents.prompts.synthesizer import SYNTHESIS_PROMPT, SYNTHESIS_USER_PROMPT
from hybrid_rag.errors import ConfigurationError, GenerationError
from hybrid_rag.state import Evidence, Plan

logger = logging.getLogger(__name__)

NO_CONTEXT = "No external context was retrieved."


def format_evidence(evidence: List[Evidence]) -> str:
    """Render evidence as [Doc:<id> Step:<id> Score:<score>] blocks."""
    if not evidence:
        return NO_CONTEXT
    parts = []
    for ev in evidence:
        parts.append(
            f"[Doc:{ev.document_id} Step:{ev.step_id} Score:{ev.score:.2f}]\n"
            f"{ev.title}\n\n"
            f"{ev.chunk.content}\n---\n"
        )
    return "".join(parts)


def format_plan(plan: Optional[Plan]) -> str:
    if plan is None:
        return "{}"
    return plan.model_dump_json(indent=2)


class Synthesizer:
    """Writes a cited draft answer from the plan and the evidence."""

    def __init__(self, llm, system_prompt: str = SYNTHESIS_PROMPT):
        if llm is None:
            raise ConfigurationError("synthesizer requires a language model client")
        self.llm = llm
        self.prompt = build_prompt(system_prompt, SYNTHESIS_USER_PROMPT)

    def compose(self, question: str, plan: Optional[Plan], evidence: List[Evidence]) -> str:
        values = {
            "question": question,
            "plan": format_plan(plan),
            "evidence": format_evidence(evidence),
        }
        try:
            raw = invoke_text(self.llm, self.prompt, values)
        except Exception as e:
            raise GenerationError(f"synthesizer call failed: {e}") from e
        draft = raw.strip()
        logger.info(f"Draft answer composed from {len(evidence)} evidence items ({len(draft)} chars)")
        return draft
