# src/hybrid_rag/retrieval/rerank.py
"""Rerankers: cosine relevance and Maximal Marginal Relevance."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from hybrid_rag.config import RetrievalConfig
from hybrid_rag.documents import Chunk
from hybrid_rag.retrieval.vectors import cosine_similarity

logger = logging.getLogger(__name__)

DEFAULT_MMR_LAMBDA = 0.7
DEFAULT_MMR_LIMIT = 8


@dataclass
class Candidate:
    chunk: Chunk
    vector: Optional[List[float]] = None
    score: float = 0.0


@dataclass
class RankedResult:
    chunk: Chunk
    score: float


class Reranker(Protocol):
    def rank(self, query_vector: Sequence[float], candidates: List[Candidate]) -> List[RankedResult]: ...


def _relevance(query_vector: Sequence[float], cand: Candidate) -> float:
    if query_vector and cand.vector and len(cand.vector) == len(query_vector):
        return cosine_similarity(query_vector, cand.vector)
    return cand.score


class CosineReranker:
    """Orders candidates by cosine similarity to the query vector."""

    def rank(self, query_vector: Sequence[float], candidates: List[Candidate]) -> List[RankedResult]:
        ranked = [RankedResult(chunk=c.chunk, score=_relevance(query_vector, c)) for c in candidates]
        ranked.sort(key=lambda r: r.score, reverse=True)
        return ranked


class MMRReranker:
    """Greedy Maximal Marginal Relevance.

    Each pick maximizes lambda * relevance - (1 - lambda) * max similarity to
    the already selected candidates. Similarity is only computed between
    vectors of equal dimension. The returned score is the plain relevance.
    """

    def __init__(self, lambda_: float = DEFAULT_MMR_LAMBDA, limit: int = DEFAULT_MMR_LIMIT):
        if not 0.0 <= lambda_ <= 1.0:
            lambda_ = DEFAULT_MMR_LAMBDA
        self.lambda_ = lambda_
        self.limit = limit

    def rank(self, query_vector: Sequence[float], candidates: List[Candidate]) -> List[RankedResult]:
        if not candidates:
            return []
        limit = self.limit if self.limit > 0 else len(candidates)

        relevance = [_relevance(query_vector, c) for c in candidates]
        remaining = list(range(len(candidates)))
        selected: List[int] = []

        while remaining and len(selected) < limit:
            best_idx = remaining[0]
            best_score = float("-inf")
            for idx in remaining:
                vec = candidates[idx].vector
                redundancy = 0.0
                if vec:
                    for sel in selected:
                        other = candidates[sel].vector
                        if other and len(other) == len(vec):
                            redundancy = max(redundancy, cosine_similarity(vec, other))
                score = self.lambda_ * relevance[idx] - (1.0 - self.lambda_) * redundancy
                if score > best_score:
                    best_score = score
                    best_idx = idx
            selected.append(best_idx)
            remaining.remove(best_idx)

        return [RankedResult(chunk=candidates[i].chunk, score=relevance[i]) for i in selected]


def make_reranker(cfg: RetrievalConfig) -> Reranker:
    if cfg.reranker == "mmr":
        return MMRReranker(lambda_=cfg.mmr_lambda, limit=cfg.vector_top_k)
    return CosineReranker()
