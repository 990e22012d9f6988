# src/hybrid_rag/pipeline/nodes/synthesis.py
from __future__ import annotations

import logging
from typing import Any, Dict

from hybrid_rag.agents.synthesizer import Synthesizer
from hybrid_rag.config import DEFAULT_NO_ANSWER_MESSAGE
from hybrid_rag.pipeline.state import PipelineState
from hybrid_rag.utils import observe, with_node_logging

logger = logging.getLogger(__name__)


def make_synthesis_node(synthesizer: Synthesizer, min_evidence_count: int = 1, no_answer_message: str = ""):
    fallback = no_answer_message.strip() or DEFAULT_NO_ANSWER_MESSAGE

    @observe
    @with_node_logging("synthesis")
    def synthesis(state: PipelineState) -> Dict[str, Any]:
        evidence = state.get("evidence") or []
        if len(evidence) < min_evidence_count:
            logger.info(f"Only {len(evidence)} evidence items (< {min_evidence_count}); skipping synthesis")
            return {"draft": fallback}
        draft = synthesizer.compose(state["question"], state.get("plan"), evidence)
        return {"draft": draft}

    return synthesis
