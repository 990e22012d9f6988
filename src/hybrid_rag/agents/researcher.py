# src/hybrid_rag/agents/researcher.py
from __future__ import annotations

import logging
from typing import List, Optional

from hybrid_rag.agents.encode import decode_json
from hybrid_rag.agents.llm import build_prompt, invoke_text
from hybrid_rag.agents.prompts.researcher import QUERY_PROMPT, QUERY_USER_PROMPT
from hybrid_rag.state import PlanStep, QueryPlan

logger = logging.getLogger(__name__)


def _dedupe(queries: List[str], limit: int) -> List[str]:
    """Trim, drop blanks and case-insensitive duplicates, cap at limit."""
    out: List[str] = []
    seen = set()
    for q in queries:
        q = (q or "").strip()
        if not q:
            continue
        key = q.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(q)
        if len(out) >= limit:
            break
    return out


class Researcher:
    """Turns a plan step into search queries.

    With a model client, queries are generated by the model; every failure
    (call error, bad JSON, empty list) is retried up to llm_retries more times
    and then falls back to deterministic queries built from the step itself.
    Generation problems are logged, never raised.
    """

    def __init__(
        self,
        llm=None,
        max_queries: int = 2,
        llm_retries: int = 1,
        system_prompt: str = QUERY_PROMPT,
    ):
        self.llm = llm
        self.max_queries = max(1, int(max_queries))
        self.llm_retries = max(0, int(llm_retries))
        self.prompt = build_prompt(system_prompt, QUERY_USER_PROMPT, max_queries=self.max_queries)

    def build_queries(self, question: str, step: PlanStep) -> List[str]:
        queries: List[str] = []
        if self.llm is not None:
            queries = self._generate(question, step) or []
        if not queries:
            queries = self.fallback_queries(question, step)

        queries = _dedupe(queries, self.max_queries)
        if not queries:
            queries = [step.goal.strip()]
        return queries

    def _generate(self, question: str, step: PlanStep) -> Optional[List[str]]:
        values = {
            "max_queries": self.max_queries,
            "question": question,
            "goal": step.goal,
            "expected_evidence": step.expected_evidence,
            "sub_questions": "\n".join(step.questions),
        }
        attempts = 1 + self.llm_retries
        for attempt in range(1, attempts + 1):
            try:
                raw = invoke_text(self.llm, self.prompt, values)
            except Exception as e:
                logger.warning(f"Query generation for {step.id} failed (attempt {attempt}/{attempts}): {e}")
                continue
            decoded = decode_json(raw, QueryPlan)
            if not decoded.ok:
                logger.warning(f"Query output for {step.id} rejected (attempt {attempt}/{attempts}): {decoded.error}")
                continue
            queries = _dedupe(decoded.value.queries, self.max_queries)
            if queries:
                return queries
            logger.warning(f"Query output for {step.id} was empty (attempt {attempt}/{attempts})")
        logger.info(f"Falling back to heuristic queries for {step.id}")
        return None

    def fallback_queries(self, question: str, step: PlanStep) -> List[str]:
        goal = step.goal.strip()
        candidates: List[str] = list(step.questions)
        if goal and step.expected_evidence.strip():
            candidates.append(f"{goal} {step.expected_evidence.strip()}")
        if goal and question.strip():
            candidates.append(f"{goal} {question.strip()}")
        candidates.append(goal)

        if len(_dedupe(candidates, self.max_queries)) < self.max_queries:
            goal_words = goal.split()
            question_words = question.split()
            if goal_words:
                candidates.append(" ".join(goal_words))
            if goal_words and question_words:
                candidates.append(f"{goal_words[0]} {question_words[0]}")

        return _dedupe(candidates, self.max_queries)
