# src/hybrid_rag/pipeline/nodes/start.py
from __future__ import annotations

import logging
from typing import Any, Dict

from hybrid_rag.pipeline.state import PipelineState
from hybrid_rag.utils import observe, trim_for_log, with_node_logging

logger = logging.getLogger(__name__)


@observe
@with_node_logging("start")
def start(state: PipelineState) -> Dict[str, Any]:
    question = (state.get("question") or "").strip()
    if not question:
        raise ValueError("question is required")
    logger.info(f"Pipeline run started: {trim_for_log(question)}")
    return {"question": question, "evidence": [], "draft": "", "critic": None, "final_answer": ""}
