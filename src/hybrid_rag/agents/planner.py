# src/hybrid_rag/agents/planner.py
from __future__ import annotations

import logging

from hybrid_rag.agents.encode import decode_json
from hybrid_rag.agents.llm import build_prompt, invoke_text
from hybrid_rag.agents.prompts.planner import PLANNER_PROMPT, PLANNER_USER_PROMPT
from hybrid_rag.errors import ConfigurationError, GenerationError, PlanningError
from hybrid_rag.state import Plan
from hybrid_rag.utils import trim_for_log

logger = logging.getLogger(__name__)


class Planner:
    """Breaks a question into at most max_steps ordered research steps."""

    def __init__(self, llm, max_steps: int = 4, system_prompt: str = PLANNER_PROMPT):
        if llm is None:
            raise ConfigurationError("planner requires a language model client")
        self.llm = llm
        self.max_steps = max(1, int(max_steps))
        self.prompt = build_prompt(system_prompt, PLANNER_USER_PROMPT, max_steps=self.max_steps)

    def plan(self, question: str) -> Plan:
        try:
            raw = invoke_text(self.llm, self.prompt, {"question": question})
        except Exception as e:
            raise GenerationError(f"planner call failed: {e}") from e

        decoded = decode_json(raw, Plan)
        if not decoded.ok:
            logger.warning(f"Planner output rejected: {decoded.error}; raw={trim_for_log(raw)!r}")
            raise PlanningError(f"planner output could not be decoded: {decoded.error}")

        plan = decoded.value
        if not plan.steps:
            raise PlanningError("planner produced no steps")

        if len(plan.steps) > self.max_steps:
            logger.info(f"Truncating plan from {len(plan.steps)} to {self.max_steps} steps")
            plan.steps = plan.steps[: self.max_steps]

        for i, step in enumerate(plan.steps):
            if not step.id.strip():
                step.id = f"step-{i + 1}"

        logger.info(f"Planned {len(plan.steps)} steps: {trim_for_log(plan.strategy)}")
        return plan
