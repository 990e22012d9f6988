# src/hybrid_rag/config.py
"""Configuration models for the retrieval engine and the agent pipeline."""

from __future__ import annotations

import os
from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from hybrid_rag.agents.prompts.critic import CRITIC_PROMPT
from hybrid_rag.agents.prompts.planner import PLANNER_PROMPT
from hybrid_rag.agents.prompts.researcher import QUERY_PROMPT
from hybrid_rag.agents.prompts.synthesizer import SYNTHESIS_PROMPT
from hybrid_rag.errors import ConfigurationError

ENV_PREFIX = "HYBRID_RAG_"

DEFAULT_NO_ANSWER_MESSAGE = "No supporting evidence was found for this question."


class ChunkingConfig(BaseModel):
    """Configures how documents are split into chunks."""

    model_config = ConfigDict(extra="forbid")

    strategy: Literal["heading", "token"] = "heading"
    max_tokens: int = Field(default=800, ge=1)
    overlap_tokens: int = Field(default=120, ge=0)
    min_tokens: int = Field(default=40, ge=0)
    min_section_tokens: int = Field(default=60, ge=0)
    heading_marker: str = Field(default="#", min_length=1)

    @model_validator(mode="after")
    def _check_overlap(self) -> "ChunkingConfig":
        if self.overlap_tokens >= self.max_tokens:
            raise ValueError("overlap_tokens must be smaller than max_tokens")
        return self


class RetrievalConfig(BaseModel):
    """Configures vector search, reranking and the keyword fallback."""

    model_config = ConfigDict(extra="forbid")

    vector_top_k: int = Field(default=8, ge=1)
    rerank_top_k: int = Field(default=4, ge=1)
    # 0 means "use rerank_top_k as the hybrid target"
    hybrid_top_k: int = Field(default=0, ge=0)
    enable_hybrid_search: bool = True
    min_search_score: float = 0.0
    title_score_penalty: float = Field(default=0.85, gt=0.0, le=1.0)
    keyword_snippet_chars: int = Field(default=480, ge=1)
    normalize_embeddings: bool = False
    reranker: Literal["cosine", "mmr"] = "cosine"
    mmr_lambda: float = Field(default=0.7, ge=0.0, le=1.0)
    # clean_document() before chunking
    clean_documents: bool = False
    # index a model-written summary of every chunk next to it
    summarize_chunks: bool = False
    summary_tokens: int = Field(default=80, ge=1)

    @property
    def hybrid_target(self) -> int:
        return self.hybrid_top_k if self.hybrid_top_k > 0 else self.rerank_top_k


class AgentConfig(BaseModel):
    """Configures the planner / researcher / synthesizer / critic pipeline."""

    model_config = ConfigDict(extra="forbid")

    name: str = "hybrid-rag"
    max_plan_steps: int = Field(default=4, ge=1)
    enable_critic: bool = True
    graph_max_visits: int = Field(default=20, ge=1)
    min_evidence_count: int = Field(default=1, ge=0)
    no_answer_message: str = DEFAULT_NO_ANSWER_MESSAGE
    query_max_results: int = Field(default=2, ge=1)
    query_llm_retries: int = Field(default=1, ge=0)

    planner_prompt: str = PLANNER_PROMPT
    query_prompt: str = QUERY_PROMPT
    synthesis_prompt: str = SYNTHESIS_PROMPT
    critic_prompt: str = CRITIC_PROMPT


class PipelineConfig(BaseModel):
    """Top-level configuration bundle."""

    model_config = ConfigDict(extra="forbid")

    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PipelineConfig":
        """Build a config from HYBRID_RAG_<SECTION>_<FIELD> variables.

        Example: HYBRID_RAG_RETRIEVAL_VECTOR_TOP_K=12. Unknown variables are ignored;
        invalid values raise ConfigurationError.
        """
        env = os.environ if environ is None else environ
        sections: Dict[str, Dict[str, Any]] = {}
        for section, model in (
            ("chunking", ChunkingConfig),
            ("retrieval", RetrievalConfig),
            ("agent", AgentConfig),
        ):
            values: Dict[str, Any] = {}
            for field_name in model.model_fields:
                key = f"{ENV_PREFIX}{section.upper()}_{field_name.upper()}"
                if key in env:
                    values[field_name] = env[key]
            sections[section] = values

        try:
            return cls.model_validate(sections)
        except ValidationError as e:
            raise ConfigurationError(f"invalid configuration from environment: {e}") from e
