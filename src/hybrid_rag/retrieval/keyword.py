# src/hybrid_rag/retrieval/keyword.py
"""In-memory BM25 keyword index over chunk text."""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List

from hybrid_rag.documents import Chunk
from hybrid_rag.retrieval.locks import ReadWriteLock

logger = logging.getLogger(__name__)

BM25_K1 = 1.6
BM25_B = 0.75

_TERM_RE = re.compile(r"[^\W\d_]+|\d+")


def keyword_terms(text: str) -> List[str]:
    """Lower-cased letter runs and digit runs."""
    return _TERM_RE.findall((text or "").lower())


@dataclass(frozen=True)
class KeywordHit:
    chunk_id: str
    score: float


class BM25Index:
    def __init__(self, k1: float = BM25_K1, b: float = BM25_B):
        self.k1 = k1
        self.b = b
        self._lock = ReadWriteLock()
        self._postings: Dict[str, Dict[str, int]] = {}
        self._doc_freq: Dict[str, int] = {}
        self._lengths: Dict[str, int] = {}
        self._total_length = 0

    def add(self, chunk: Chunk) -> None:
        terms = keyword_terms(chunk.content)
        if not terms:
            return
        freqs = Counter(terms)
        with self._lock.write():
            if chunk.id in self._lengths:
                self._remove_locked(chunk.id)
            for term, tf in freqs.items():
                self._postings.setdefault(term, {})[chunk.id] = tf
                self._doc_freq[term] = self._doc_freq.get(term, 0) + 1
            self._lengths[chunk.id] = len(terms)
            self._total_length += len(terms)

    def remove(self, chunk_id: str) -> None:
        """Forget chunk_id; unknown ids are ignored."""
        with self._lock.write():
            if chunk_id in self._lengths:
                self._remove_locked(chunk_id)

    def _remove_locked(self, chunk_id: str) -> None:
        for term in list(self._postings):
            postings = self._postings[term]
            if chunk_id not in postings:
                continue
            del postings[chunk_id]
            self._doc_freq[term] -= 1
            if not postings:
                del self._postings[term]
                del self._doc_freq[term]
        self._total_length -= self._lengths.pop(chunk_id, 0)

    def search(self, query: str, limit: int = 0) -> List[KeywordHit]:
        """Rank chunks by BM25 against query; limit <= 0 returns every match."""
        terms = list(dict.fromkeys(keyword_terms(query)))
        with self._lock.read():
            n = len(self._lengths)
            if n == 0 or not terms:
                return []
            avg_len = self._total_length / n

            scores: Dict[str, float] = {}
            for term in terms:
                postings = self._postings.get(term)
                if not postings:
                    continue
                df = self._doc_freq[term]
                idf = math.log((n - df + 0.5) / (df + 0.5) + 1.0)
                for chunk_id, tf in postings.items():
                    norm = 1.0 - self.b + self.b * (self._lengths[chunk_id] / avg_len)
                    scores[chunk_id] = scores.get(chunk_id, 0.0) + idf * (tf * (self.k1 + 1.0)) / (tf + self.k1 * norm)

        hits = [KeywordHit(chunk_id=cid, score=s) for cid, s in scores.items()]
        hits.sort(key=lambda h: (-h.score, h.chunk_id))
        if limit > 0:
            hits = hits[:limit]
        return hits

    def reset(self) -> None:
        with self._lock.write():
            self._postings.clear()
            self._doc_freq.clear()
            self._lengths.clear()
            self._total_length = 0

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._lengths)
