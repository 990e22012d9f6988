# src/hybrid_rag/pipeline/nodes/planner.py
from __future__ import annotations

from typing import Any, Dict

from hybrid_rag.agents.planner import Planner
from hybrid_rag.pipeline.state import PipelineState
from hybrid_rag.utils import observe, with_node_logging


def make_planner_node(planner: Planner):
    @observe
    @with_node_logging("planner")
    def plan(state: PipelineState) -> Dict[str, Any]:
        return {"plan": planner.plan(state["question"])}

    return plan
