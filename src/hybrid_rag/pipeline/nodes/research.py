# src/hybrid_rag/pipeline/nodes/research.py
from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from hybrid_rag.agents.researcher import Researcher
from hybrid_rag.errors import HybridRAGError, RetrievalError
from hybrid_rag.pipeline.state import PipelineState
from hybrid_rag.retrieval.engine import RetrievalEngine
from hybrid_rag.state import Evidence, summarize
from hybrid_rag.utils import observe, trim_for_log, with_node_logging

logger = logging.getLogger(__name__)


def make_research_node(researcher: Researcher, engine: RetrievalEngine):
    """Research node:
    - builds queries for every plan step
    - searches the engine once per query
    - keeps one Evidence per (step id, chunk id), with the higher score
    """

    @observe
    @with_node_logging("research")
    def research(state: PipelineState) -> Dict[str, Any]:
        plan = state.get("plan")
        if plan is None:
            raise HybridRAGError("research requires a plan")

        question = state["question"]
        collected: Dict[Tuple[str, str], Evidence] = {}

        for step in plan.steps:
            queries = researcher.build_queries(question, step)
            logger.debug(f"{step.id}: {len(queries)} queries {queries}")
            for query in queries:
                try:
                    results = engine.search(query)
                except RetrievalError:
                    raise
                except Exception as e:
                    raise RetrievalError(f"search failed for {trim_for_log(query, 60)!r}: {e}") from e

                for res in results:
                    doc = engine.document(res.chunk.document_id)
                    if doc is None:
                        logger.debug(f"Skipping chunk {res.chunk.id}: document {res.chunk.document_id} not found")
                        continue
                    key = (step.id, res.chunk.id)
                    existing = collected.get(key)
                    if existing is not None:
                        if res.score > existing.score:
                            existing.score = res.score
                            existing.query = query
                        continue
                    collected[key] = Evidence(
                        step_id=step.id,
                        query=query,
                        chunk=res.chunk,
                        document=doc,
                        score=res.score,
                        summary=summarize(res.chunk.content),
                    )

        evidence = list(collected.values())
        logger.info(f"Collected {len(evidence)} evidence items across {len(plan.steps)} steps")
        return {"evidence": evidence}

    return research
