# src/hybrid_rag/pipeline/pipeline.py
"""Pipeline facade: wires the agents, the retrieval engine and the graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from langchain_core.embeddings import Embeddings
from langgraph.errors import GraphRecursionError

from hybrid_rag.agents.chunk_summarizer import ChunkSummarizer
from hybrid_rag.agents.critic import Critic
from hybrid_rag.agents.planner import Planner
from hybrid_rag.agents.researcher import Researcher
from hybrid_rag.agents.synthesizer import Synthesizer
from hybrid_rag.config import PipelineConfig
from hybrid_rag.documents import Document
from hybrid_rag.errors import ConfigurationError, GraphExecutionError
from hybrid_rag.pipeline.graph import make_pipeline_graph
from hybrid_rag.pipeline.state import PipelineResponse
from hybrid_rag.retrieval.engine import HybridRetrievalEngine, Preprocessor, RetrievalEngine, Summarizer
from hybrid_rag.retrieval.preprocess import clean_document
from hybrid_rag.retrieval.vectors import VectorStore
from hybrid_rag.utils import trim_for_log

logger = logging.getLogger(__name__)


@dataclass
class Clients:
    """Chat model per role. Roles left empty use `default`."""

    default: Any = None
    planner: Any = None
    researcher: Any = None
    writer: Any = None
    critic: Any = None
    summarizer: Any = None

    def pick(self, role: str) -> Any:
        client = getattr(self, role)
        return client if client is not None else self.default


class AgenticPipeline:
    """Answers questions with the plan, research, synthesis and critic graph.

    preprocess and summarizer configure the engine built from store and
    embeddings; an engine passed in is used as is. The critic runs only when
    enable_critic is set and a critic (or default) client exists.
    """

    def __init__(
        self,
        clients: Clients,
        embeddings: Optional[Embeddings] = None,
        store: Optional[VectorStore] = None,
        *,
        config: Optional[PipelineConfig] = None,
        engine: Optional[RetrievalEngine] = None,
        preprocess: Optional[Preprocessor] = None,
        summarizer: Optional[Summarizer] = None,
    ):
        self.config = config or PipelineConfig()
        agent_cfg = self.config.agent

        planner_llm = clients.pick("planner")
        writer_llm = clients.pick("writer")
        if planner_llm is None:
            raise ConfigurationError("planner client is required")
        if writer_llm is None:
            raise ConfigurationError("writer client is required")

        if engine is None:
            if store is None or embeddings is None:
                raise ConfigurationError("vector store and embeddings are required when no retrieval engine is given")
            retrieval_cfg = self.config.retrieval
            if preprocess is None and retrieval_cfg.clean_documents:
                preprocess = clean_document
            if summarizer is None and retrieval_cfg.summarize_chunks:
                summarizer = ChunkSummarizer(clients.pick("summarizer"), retrieval_cfg.summary_tokens)
            engine = HybridRetrievalEngine(
                store,
                embeddings,
                retrieval=retrieval_cfg,
                chunking=self.config.chunking,
                preprocess=preprocess,
                summarizer=summarizer,
            )
        self.engine = engine

        self.planner = Planner(planner_llm, agent_cfg.max_plan_steps, agent_cfg.planner_prompt)
        self.researcher = Researcher(
            clients.pick("researcher"),
            max_queries=agent_cfg.query_max_results,
            llm_retries=agent_cfg.query_llm_retries,
            system_prompt=agent_cfg.query_prompt,
        )
        self.synthesizer = Synthesizer(writer_llm, agent_cfg.synthesis_prompt)
        critic_llm = clients.pick("critic")
        self.critic = None
        if agent_cfg.enable_critic and critic_llm is not None:
            self.critic = Critic(critic_llm, agent_cfg.critic_prompt)

        self.graph = make_pipeline_graph(
            planner=self.planner,
            researcher=self.researcher,
            synthesizer=self.synthesizer,
            engine=self.engine,
            critic=self.critic,
            min_evidence_count=agent_cfg.min_evidence_count,
            no_answer_message=agent_cfg.no_answer_message,
        )

    def run(self, question: str) -> PipelineResponse:
        if not (question or "").strip():
            raise ValueError("question cannot be empty")

        limit = self.config.agent.graph_max_visits
        logger.info(f"[{self.config.agent.name}] run: {trim_for_log(question)}")
        try:
            out = self.graph.invoke({"question": question}, config={"recursion_limit": limit})
        except GraphRecursionError as e:
            raise GraphExecutionError(f"graph exceeded {limit} node visits") from e
        return PipelineResponse.from_state(out)

    def index_documents(self, *docs: Document) -> None:
        prepared = []
        for doc in docs:
            if not (doc.content or "").strip():
                raise ValueError(f"document {doc.id or '<unnamed>'} has empty content")
            prepared.append(doc.clone())
        self.engine.index_documents(*prepared)

    def clear_documents(self) -> None:
        self.engine.clear()

    def count_documents(self) -> int:
        return self.engine.count()
