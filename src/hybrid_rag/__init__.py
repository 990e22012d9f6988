"""Hybrid RAG engine and agent pipeline using LangGraph.

This package provides:
- Retrieval: chunking, BM25 keyword index, vector search, reranking
- Agents: planner, researcher, synthesizer, critic
- Pipeline: the graph that drives the agents over the retrieval engine
"""

__version__ = "0.1.0"
