# src/hybrid_rag/agents/critic.py
from __future__ import annotations

import logging
from typing import List, Optional

from hybrid_rag.agents.encode import decode_json
from hybrid_rag.agents.llm import build_prompt, invoke_text
from hybrid_rag.agents.prompts.critic import CRITIC_PROMPT, CRITIC_USER_PROMPT
from hybrid_rag.agents.synthesizer import format_evidence, format_plan
from hybrid_rag.errors import GenerationError
from hybrid_rag.state import CriticFeedback, Evidence, Plan

logger = logging.getLogger(__name__)


class Critic:
    """Reviews the draft; a malformed review is treated as approval of the draft."""

    def __init__(self, llm=None, system_prompt: str = CRITIC_PROMPT):
        self.llm = llm
        self.prompt = build_prompt(system_prompt, CRITIC_USER_PROMPT)

    def review(
        self,
        question: str,
        draft: str,
        plan: Optional[Plan],
        evidence: List[Evidence],
    ) -> Optional[CriticFeedback]:
        if self.llm is None:
            return None

        values = {
            "question": question,
            "plan": format_plan(plan),
            "evidence": format_evidence(evidence),
            "draft": draft,
        }
        try:
            raw = invoke_text(self.llm, self.prompt, values)
        except Exception as e:
            raise GenerationError(f"critic call failed: {e}") from e

        decoded = decode_json(raw, CriticFeedback)
        if not decoded.ok:
            logger.warning(f"Critic output could not be parsed, approving draft: {decoded.error}")
            return CriticFeedback(
                verdict="approve",
                notes=f"critic output parse error: {decoded.error}",
                final_answer=draft,
            )

        feedback = decoded.value
        if not feedback.final_answer.strip():
            feedback.final_answer = draft
        logger.info(f"Critic verdict={feedback.verdict} issues={len(feedback.issues)}")
        return feedback
