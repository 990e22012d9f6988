# src/hybrid_rag/pipeline/nodes/end.py
from __future__ import annotations

import logging
from typing import Any, Dict

from hybrid_rag.pipeline.state import PipelineState
from hybrid_rag.utils import observe, with_node_logging

logger = logging.getLogger(__name__)


@observe
@with_node_logging("end")
def end(state: PipelineState) -> Dict[str, Any]:
    draft = state.get("draft", "")
    feedback = state.get("critic")
    final = draft
    if feedback is not None and feedback.final_answer.strip():
        final = feedback.final_answer.strip()
    logger.info(f"Pipeline run finished ({len(final)} chars)")
    return {"final_answer": final}
