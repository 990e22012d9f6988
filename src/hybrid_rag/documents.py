# src/hybrid_rag/documents.py
"""Document and chunk records shared by the chunkers, the index and the pipeline."""

from __future__ import annotations

import hashlib
import itertools
from dataclasses import dataclass, field, replace
from typing import Any, Dict

_chunk_counter = itertools.count(1)


@dataclass
class Document:
    id: str = ""
    title: str = ""
    content: str = ""
    source: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def clone(self) -> "Document":
        return replace(self, metadata=dict(self.metadata))


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of a document. Only chunkers create chunks."""

    id: str
    document_id: str
    content: str
    section: str = ""
    ordinal: int = 0
    token_count: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def clone(self, **changes: Any) -> "Chunk":
        metadata = dict(changes.pop("metadata", self.metadata))
        return replace(self, metadata=metadata, **changes)


def ensure_document_id(doc: Document) -> str:
    """Assign a deterministic id (sha1 of source + content) when the document has none."""
    if doc.id:
        return doc.id
    digest = hashlib.sha1(f"{doc.source}{doc.content}".encode("utf-8")).hexdigest()
    doc.id = digest[:16]
    return doc.id


def next_chunk_id(document_id: str) -> str:
    """Process-unique chunk id."""
    return f"{document_id}_chunk_{next(_chunk_counter)}"
