# src/hybrid_rag/retrieval/engine.py
"""Hybrid retrieval engine: vector search + rerank, with a BM25 keyword fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Set

from langchain_core.embeddings import Embeddings

from hybrid_rag.config import ChunkingConfig, RetrievalConfig
from hybrid_rag.documents import Chunk, Document, ensure_document_id
from hybrid_rag.errors import ConfigurationError, RetrievalError
from hybrid_rag.retrieval.chunking import SECTION_BODY, SECTION_TITLE, Chunker, make_chunker
from hybrid_rag.retrieval.keyword import BM25Index
from hybrid_rag.retrieval.locks import ReadWriteLock
from hybrid_rag.retrieval.rerank import Candidate, Reranker, make_reranker
from hybrid_rag.retrieval.vectors import Embedding, EmbeddingAdapter, VectorStore
from hybrid_rag.state import ChunkSummary
from hybrid_rag.utils import trim_for_log

logger = logging.getLogger(__name__)

RETRIEVAL_KEYWORD = "keyword"
SECTION_SUMMARY = "summary"
SUMMARY_SUFFIX = "_summary"

Preprocessor = Callable[[Document], Document]


@dataclass
class RetrievalResult:
    chunk: Chunk
    score: float


class Summarizer(Protocol):
    def summarize_chunks(self, chunks: List[Chunk]) -> List[ChunkSummary]: ...


class RetrievalEngine(Protocol):
    def index_documents(self, *docs: Document) -> None: ...

    def search(self, query: str) -> List[RetrievalResult]: ...

    def document(self, document_id: str) -> Optional[Document]: ...

    def clear(self) -> None: ...

    def count(self) -> int: ...


class HybridRetrievalEngine:
    """Owns the chunker, the BM25 index and the document / chunk caches.

    Indexing and clear() take the exclusive lock; search() and document()
    take the shared lock.

    Optional collaborators:
        preprocess: applied to a copy of every document before chunking.
        summarizer: its per-chunk summaries are embedded as extra vectors with
            id "<chunk id>_summary" and metadata section="summary". They are
            searchable by vector only.

    Re-indexing a document id replaces the chunks previously indexed for it.
    """

    def __init__(
        self,
        store: VectorStore,
        embeddings: Embeddings,
        *,
        retrieval: Optional[RetrievalConfig] = None,
        chunking: Optional[ChunkingConfig] = None,
        chunker: Optional[Chunker] = None,
        reranker: Optional[Reranker] = None,
        preprocess: Optional[Preprocessor] = None,
        summarizer: Optional[Summarizer] = None,
    ):
        if store is None or embeddings is None:
            raise ConfigurationError("vector store and embeddings are required")
        self.cfg = retrieval or RetrievalConfig()
        self.store = store
        self.embedder = EmbeddingAdapter(embeddings, normalize_vectors=self.cfg.normalize_embeddings)
        self.chunker = chunker or make_chunker(chunking or ChunkingConfig())
        self.reranker = reranker or make_reranker(self.cfg)
        self.preprocess = preprocess
        self.summarizer = summarizer
        self.keyword = BM25Index()

        self._lock = ReadWriteLock()
        self._documents: Dict[str, Document] = {}
        self._chunks: Dict[str, Chunk] = {}
        self._document_chunks: Dict[str, List[str]] = {}

    # ---------------------------
    # Indexing
    # ---------------------------

    def index_documents(self, *docs: Document) -> None:
        with self._lock.write():
            for doc in docs:
                self._index_one(doc)

    def _index_one(self, doc: Document) -> None:
        if self.preprocess is not None:
            try:
                doc = self.preprocess(doc.clone())
            except Exception as e:
                raise RetrievalError(
                    f"preprocessing failed for document {doc.id or '<unnamed>'}: {e}", document_id=doc.id or None
                ) from e
        ensure_document_id(doc)
        try:
            chunks = self.chunker.chunk(doc)
        except Exception as e:
            raise RetrievalError(f"chunking failed for document {doc.id}: {e}", document_id=doc.id) from e

        summary_chunks = self._summary_chunks(doc, chunks)
        entries = chunks + summary_chunks

        try:
            vectors = self.embedder.embed_documents([c.content for c in entries])
        except Exception as e:
            raise RetrievalError(f"embedding failed for document {doc.id}: {e}", document_id=doc.id) from e

        self._drop_document(doc.id)

        for chunk, vector in zip(entries, vectors):
            try:
                self.store.add_embedding(Embedding(id=chunk.id, vector=vector, text=chunk.content))
            except Exception as e:
                raise RetrievalError(
                    f"vector store rejected chunk {chunk.id}: {e}", document_id=doc.id, chunk_id=chunk.id
                ) from e
            self._chunks[chunk.id] = chunk.clone()
            self._document_chunks.setdefault(doc.id, []).append(chunk.id)
        for chunk in chunks:
            self.keyword.add(chunk)

        self._documents[doc.id] = doc.clone()
        logger.info(f"Indexed document {doc.id} ({len(chunks)} chunks, {len(summary_chunks)} summaries)")

    def _summary_chunks(self, doc: Document, chunks: List[Chunk]) -> List[Chunk]:
        if self.summarizer is None or not chunks:
            return []
        try:
            summaries = self.summarizer.summarize_chunks(chunks)
        except Exception as e:
            raise RetrievalError(f"summarizing chunks failed for document {doc.id}: {e}", document_id=doc.id) from e

        out: List[Chunk] = []
        for chunk, summary in zip(chunks, summaries):
            text = (summary.summary or "").strip()
            if not text:
                continue
            meta = dict(chunk.metadata)
            meta["section"] = SECTION_SUMMARY
            meta["source_chunk"] = chunk.id
            if summary.key_points:
                meta["key_points"] = list(summary.key_points)
            out.append(chunk.clone(id=chunk.id + SUMMARY_SUFFIX, content=text, metadata=meta))
        return out

    def _drop_document(self, document_id: str) -> None:
        """Remove everything indexed for document_id. Caller holds the write lock."""
        previous = self._document_chunks.pop(document_id, [])
        for chunk_id in previous:
            self._chunks.pop(chunk_id, None)
            self.keyword.remove(chunk_id)
            try:
                self.store.delete_embedding(chunk_id)
            except KeyError:
                logger.debug(f"Embedding {chunk_id} was already gone from the vector store")
            except Exception as e:
                raise RetrievalError(
                    f"vector store failed to delete chunk {chunk_id}: {e}", document_id=document_id, chunk_id=chunk_id
                ) from e
        if previous:
            logger.info(f"Replaced {len(previous)} previously indexed entries of document {document_id}")

    # ---------------------------
    # Search
    # ---------------------------

    def search(self, query: str) -> List[RetrievalResult]:
        cfg = self.cfg
        try:
            query_vec = self.embedder.embed_query(query)
            hits = self.store.search(query_vec, cfg.vector_top_k)
        except Exception as e:
            raise RetrievalError(f"vector search failed for query {trim_for_log(query, 60)!r}: {e}") from e

        with self._lock.read():
            candidates: List[Candidate] = []
            for emb, score in hits:
                chunk = self._chunks.get(emb.id)
                if chunk is None:
                    continue
                candidates.append(Candidate(chunk=chunk.clone(), vector=list(emb.vector), score=score))

            ranked = self.reranker.rank(query_vec, candidates) if candidates else []
            ranked = ranked[: cfg.rerank_top_k]

            results: List[RetrievalResult] = []
            seen: Set[str] = set()
            for r in ranked:
                score = r.score
                if r.chunk.metadata.get("section") == SECTION_TITLE:
                    score *= cfg.title_score_penalty
                if score < cfg.min_search_score:
                    continue
                if r.chunk.id in seen:
                    continue
                seen.add(r.chunk.id)
                results.append(RetrievalResult(chunk=r.chunk, score=score))
            # re-sort after the title penalty
            results.sort(key=lambda res: res.score, reverse=True)

            target = cfg.hybrid_target
            if cfg.enable_hybrid_search and len(results) < target:
                results.extend(self._keyword_fallback(query, target - len(results), seen))

        logger.debug(
            f"Search {trim_for_log(query, 60)!r}: {len(hits)} vector hits, {len(results)} results"
        )
        return results

    def _keyword_fallback(self, query: str, shortfall: int, seen: Set[str]) -> List[RetrievalResult]:
        out: List[RetrievalResult] = []
        # over-fetch so already-seen chunks do not eat into the shortfall
        for hit in self.keyword.search(query, shortfall + len(seen)):
            if len(out) >= shortfall:
                break
            if hit.chunk_id in seen:
                continue
            chunk = self._chunks.get(hit.chunk_id)
            if chunk is None:
                continue
            seen.add(hit.chunk_id)
            meta = dict(chunk.metadata)
            meta["retrieval"] = RETRIEVAL_KEYWORD
            meta["section"] = SECTION_BODY
            snippet = chunk.clone(content=chunk.content[: self.cfg.keyword_snippet_chars], metadata=meta)
            out.append(RetrievalResult(chunk=snippet, score=hit.score))
        if out:
            logger.debug(f"Keyword fallback added {len(out)} chunks")
        return out

    # ---------------------------
    # Lookup / maintenance
    # ---------------------------

    def document(self, document_id: str) -> Optional[Document]:
        with self._lock.read():
            doc = self._documents.get(document_id)
            return doc.clone() if doc is not None else None

    def clear(self) -> None:
        with self._lock.write():
            try:
                self.store.clear()
            except Exception as e:
                raise RetrievalError(f"vector store clear failed: {e}") from e
            self._documents.clear()
            self._chunks.clear()
            self._document_chunks.clear()
            self.keyword.reset()
        logger.info("Cleared retrieval engine")

    def count(self) -> int:
        return self.store.count()
