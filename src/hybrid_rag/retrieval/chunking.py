# src/hybrid_rag/retrieval/chunking.py
"""Chunkers: split documents into bounded, overlapping chunks.

Two strategies are provided:
- TokenWindowChunker: paragraph split, sliding window over long paragraphs
- HeadingAwareChunker: sections opened at heading lines, chunks tagged title/body
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from hybrid_rag.config import ChunkingConfig
from hybrid_rag.documents import Chunk, Document, ensure_document_id, next_chunk_id
from hybrid_rag.errors import ConfigurationError
from hybrid_rag.retrieval.tokenizer import DEFAULT_TOKENIZER, SimpleTokenizer

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")

SECTION_TITLE = "title"
SECTION_BODY = "body"


class Chunker(Protocol):
    def chunk(self, doc: Document) -> List[Chunk]: ...


@dataclass
class _Piece:
    text: str
    tokens: int
    section_title: str = ""


def _split_paragraphs(text: str) -> List[str]:
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text or "") if p.strip()]


class TokenWindowChunker:
    """Paragraph chunker with a sliding token window for oversized paragraphs."""

    def __init__(
        self,
        max_tokens: int = 800,
        overlap_tokens: int = 120,
        min_tokens: int = 40,
        tokenizer: Optional[SimpleTokenizer] = None,
    ):
        if max_tokens <= 0:
            raise ConfigurationError("max_tokens must be positive")
        if overlap_tokens < 0 or overlap_tokens >= max_tokens:
            raise ConfigurationError("overlap_tokens must be in [0, max_tokens)")
        self.max_tokens = max_tokens
        self.overlap_tokens = overlap_tokens
        self.min_tokens = max(0, min_tokens)
        self.tokenizer = tokenizer or DEFAULT_TOKENIZER

    @classmethod
    def from_config(cls, cfg: ChunkingConfig) -> "TokenWindowChunker":
        return cls(cfg.max_tokens, cfg.overlap_tokens, cfg.min_tokens)

    def window(self, text: str) -> List[str]:
        """Slice text into windows of max_tokens tokens stepping by max_tokens - overlap_tokens.

        Windows are cut from the original text on token boundaries, so the
        overlap between neighbours is exact and whitespace is preserved.
        """
        spans = self.tokenizer.spans(text)
        if len(spans) <= self.max_tokens:
            return [text]

        step = self.max_tokens - self.overlap_tokens
        windows: List[str] = []
        start = 0
        while start < len(spans):
            end = min(start + self.max_tokens, len(spans))
            windows.append(text[spans[start][0] : spans[end - 1][1]])
            if end == len(spans):
                break
            start += step
        return windows

    def split_text(self, text: str, section_title: str = "") -> List[_Piece]:
        pieces: List[_Piece] = []
        for para in _split_paragraphs(text):
            for part in self.window(para):
                pieces.append(_Piece(part, self.tokenizer.count_tokens(part), section_title))
        return self.merge_small(pieces)

    def merge_small(self, pieces: List[_Piece]) -> List[_Piece]:
        """Merge pieces below min_tokens into their predecessor, or forward when none exists."""
        if self.min_tokens <= 0 or len(pieces) < 2:
            return pieces

        merged: List[_Piece] = []
        carry: Optional[_Piece] = None
        for piece in pieces:
            if carry is not None:
                piece = _Piece(
                    f"{carry.text}\n\n{piece.text}",
                    carry.tokens + piece.tokens,
                    carry.section_title or piece.section_title,
                )
                carry = None
            if piece.tokens >= self.min_tokens:
                merged.append(piece)
            elif merged:
                prev = merged[-1]
                merged[-1] = _Piece(
                    f"{prev.text}\n\n{piece.text}",
                    prev.tokens + piece.tokens,
                    prev.section_title or piece.section_title,
                )
            else:
                carry = piece
        if carry is not None:
            merged.append(carry)
        return merged

    def chunk(self, doc: Document) -> List[Chunk]:
        ensure_document_id(doc)
        pieces = self.split_text(doc.content)
        return _build_chunks(doc, pieces, self.tokenizer, tag_sections=False)


class HeadingAwareChunker:
    """Splits on heading lines; paragraphs inside a section are windowed like TokenWindowChunker."""

    def __init__(
        self,
        max_tokens: int = 800,
        overlap_tokens: int = 120,
        min_tokens: int = 40,
        min_section_tokens: int = 60,
        heading_marker: str = "#",
        tokenizer: Optional[SimpleTokenizer] = None,
    ):
        if not heading_marker:
            raise ConfigurationError("heading_marker must not be empty")
        self.splitter = TokenWindowChunker(max_tokens, overlap_tokens, min_tokens, tokenizer)
        self.min_section_tokens = max(0, min_section_tokens)
        self.heading_marker = heading_marker

    @classmethod
    def from_config(cls, cfg: ChunkingConfig) -> "HeadingAwareChunker":
        return cls(
            cfg.max_tokens,
            cfg.overlap_tokens,
            cfg.min_tokens,
            cfg.min_section_tokens,
            cfg.heading_marker,
        )

    @property
    def tokenizer(self) -> SimpleTokenizer:
        return self.splitter.tokenizer

    def _heading_text(self, line: str) -> str:
        return line.strip().lstrip(self.heading_marker).strip()

    def sections(self, text: str) -> List[_Piece]:
        """Group lines into sections; short sections are buffered into the next one."""
        raw: List[_Piece] = []
        lines: List[str] = []
        title = ""

        def flush() -> None:
            body = "\n".join(lines).strip()
            if body:
                raw.append(_Piece(body, self.tokenizer.count_tokens(body), title))

        for line in (text or "").splitlines():
            if line.strip().startswith(self.heading_marker):
                flush()
                lines = []
                title = self._heading_text(line)
            lines.append(line)
        flush()

        out: List[_Piece] = []
        buffer: Optional[_Piece] = None
        for sec in raw:
            if buffer is not None:
                sec = _Piece(
                    f"{buffer.text}\n\n{sec.text}",
                    buffer.tokens + sec.tokens,
                    buffer.section_title or sec.section_title,
                )
                buffer = None
            if sec.tokens < self.min_section_tokens:
                buffer = sec
                continue
            out.append(sec)
        if buffer is not None:
            out.append(buffer)
        return out

    def chunk(self, doc: Document) -> List[Chunk]:
        ensure_document_id(doc)
        pieces: List[_Piece] = []
        for sec in self.sections(doc.content):
            pieces.extend(self.splitter.split_text(sec.text, sec.section_title))
        return _build_chunks(doc, pieces, self.tokenizer, tag_sections=True, marker=self.heading_marker)


def _build_chunks(
    doc: Document,
    pieces: List[_Piece],
    tokenizer: SimpleTokenizer,
    *,
    tag_sections: bool,
    marker: str = "#",
) -> List[Chunk]:
    if not pieces:
        # Every document yields at least one indexable unit.
        meta: Dict[str, Any] = dict(doc.metadata)
        if tag_sections:
            meta["section"] = SECTION_BODY
        return [
            Chunk(
                id=next_chunk_id(doc.id),
                document_id=doc.id,
                content=doc.content,
                ordinal=1,
                token_count=tokenizer.count_tokens(doc.content),
                metadata=meta,
            )
        ]

    chunks: List[Chunk] = []
    for ordinal, piece in enumerate(pieces, start=1):
        meta = dict(doc.metadata)
        if tag_sections:
            meta["section"] = SECTION_TITLE if piece.text.strip().startswith(marker) else SECTION_BODY
            if piece.section_title:
                meta["section_title"] = piece.section_title
        chunks.append(
            Chunk(
                id=next_chunk_id(doc.id),
                document_id=doc.id,
                content=piece.text,
                section=piece.section_title,
                ordinal=ordinal,
                token_count=piece.tokens,
                metadata=meta,
            )
        )
    logger.debug(f"Chunked document {doc.id} into {len(chunks)} chunks")
    return chunks


def make_chunker(cfg: ChunkingConfig) -> Chunker:
    if cfg.strategy == "token":
        return TokenWindowChunker.from_config(cfg)
    return HeadingAwareChunker.from_config(cfg)
