# src/hybrid_rag/agents/prompts/researcher.py
QUERY_PROMPT = """You are a search strategist.

Given a research step, produce up to {max_queries} short search queries that would
retrieve passages supporting the step from a document corpus.
Queries should be keyword rich and must not repeat each other.

Return JSON only: {"queries": ["...", "..."]}
"""

QUERY_USER_PROMPT = """Original question: {question}
Step goal: {goal}
Expected evidence: {expected_evidence}
Known sub-questions:
{sub_questions}

Return JSON with the search queries (max {max_queries})."""
