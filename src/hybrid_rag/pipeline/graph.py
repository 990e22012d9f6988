# src/hybrid_rag/pipeline/graph.py

from __future__ import annotations

from typing import Optional

from langgraph.graph import END, START, StateGraph

from hybrid_rag.agents.critic import Critic
from hybrid_rag.agents.planner import Planner
from hybrid_rag.agents.researcher import Researcher
from hybrid_rag.agents.synthesizer import Synthesizer
from hybrid_rag.pipeline.nodes.critic import RUN, SKIP, make_critic_gate, make_critic_node
from hybrid_rag.pipeline.nodes.end import end
from hybrid_rag.pipeline.nodes.planner import make_planner_node
from hybrid_rag.pipeline.nodes.research import make_research_node
from hybrid_rag.pipeline.nodes.start import start
from hybrid_rag.pipeline.nodes.synthesis import make_synthesis_node
from hybrid_rag.pipeline.state import PipelineState
from hybrid_rag.retrieval.engine import RetrievalEngine


def make_pipeline_graph(
    *,
    planner: Planner,
    researcher: Researcher,
    synthesizer: Synthesizer,
    engine: RetrievalEngine,
    critic: Optional[Critic] = None,
    min_evidence_count: int = 1,
    no_answer_message: str = "",
):
    # No retry policies: retrieval and generation failures abort the run.
    g = StateGraph(PipelineState)

    g.add_node("start", start)
    g.add_node("planner", make_planner_node(planner))
    g.add_node("research", make_research_node(researcher, engine))
    g.add_node("synthesis", make_synthesis_node(synthesizer, min_evidence_count, no_answer_message))
    g.add_node("end", end)

    g.add_edge(START, "start")
    g.add_edge("start", "planner")
    g.add_edge("planner", "research")
    g.add_edge("research", "synthesis")

    if critic is not None:
        g.add_node("critic", make_critic_node(critic))
        g.add_conditional_edges("synthesis", make_critic_gate(critic), {RUN: "critic", SKIP: "end"})
        g.add_edge("critic", "end")
    else:
        g.add_conditional_edges("synthesis", make_critic_gate(None), {SKIP: "end"})

    g.add_edge("end", END)

    return g.compile()
