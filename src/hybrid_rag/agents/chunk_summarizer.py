# src/hybrid_rag/agents/chunk_summarizer.py
from __future__ import annotations

import logging
from typing import List

from hybrid_rag.agents.encode import decode_json
from hybrid_rag.agents.llm import build_prompt, invoke_text
from hybrid_rag.agents.prompts.summary import SUMMARY_PROMPT, SUMMARY_USER_PROMPT
from hybrid_rag.documents import Chunk
from hybrid_rag.errors import ConfigurationError, GenerationError
from hybrid_rag.state import ChunkSummary

logger = logging.getLogger(__name__)


class ChunkSummarizer:
    """Summarises chunks one model call at a time, preserving chunk order."""

    def __init__(self, llm, summary_tokens: int = 80, system_prompt: str = SUMMARY_PROMPT):
        if llm is None:
            raise ConfigurationError("chunk summarizer requires a language model client")
        self.llm = llm
        self.prompt = build_prompt(system_prompt, SUMMARY_USER_PROMPT, summary_tokens=max(1, int(summary_tokens)))

    def summarize_chunks(self, chunks: List[Chunk]) -> List[ChunkSummary]:
        return [self._summarize(chunk) for chunk in chunks]

    def _summarize(self, chunk: Chunk) -> ChunkSummary:
        values = {
            "title": chunk.metadata.get("title") or chunk.section,
            "section": chunk.section,
            "content": chunk.content,
        }
        try:
            raw = invoke_text(self.llm, self.prompt, values)
        except Exception as e:
            raise GenerationError(f"summary call failed for chunk {chunk.id}: {e}") from e

        decoded = decode_json(raw, ChunkSummary)
        if not decoded.ok:
            raise GenerationError(f"summary for chunk {chunk.id} could not be decoded: {decoded.error}")

        summary = decoded.value
        summary.chunk_id = chunk.id
        logger.debug(f"Summarised {chunk.id}: {len(summary.summary)} chars, {len(summary.key_points)} key points")
        return summary
