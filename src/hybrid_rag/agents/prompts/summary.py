# src/hybrid_rag/agents/prompts/summary.py
# {summary_tokens} is filled by the summarizer; the rest of the text is sent as written.
SUMMARY_PROMPT = """You summarise passages of a document corpus for a search index.

Requirements:
1) Answer in the language of the passage.
2) Write a concise summary of roughly {summary_tokens} tokens.
3) Extract 3-5 key points.

Return JSON only: {"summary": "...", "key_points": ["...", "..."]}
"""

SUMMARY_USER_PROMPT = """Title: {title}
Section: {section}
Content:
{content}

Return JSON only."""
