"""Shared utilities for loading corpora and writing run artifacts."""

import json
from glob import glob
from pathlib import Path
from typing import Any, Dict, List

from hybrid_rag.documents import Document

TEXT_SUFFIXES = {".md", ".markdown", ".txt"}


def load_document(path: Path) -> Document:
    """Load a text/markdown file as a Document; the first heading becomes the title."""
    content = path.read_text(encoding="utf-8")
    title = path.stem
    for line in content.splitlines():
        if line.strip().startswith("#"):
            title = line.strip().lstrip("#").strip() or title
            break
    return Document(
        id=path.stem,
        title=title,
        content=content,
        source=str(path),
        metadata={"path": str(path)},
    )


def resolve_documents(pattern: str) -> List[Document]:
    """
    Resolve a file path or glob pattern to a list of Documents, sorted by path.

    Supports:
    - Single file: /path/to/doc.md
    - Glob pattern: docs/**/*.md
    """
    if not any(c in pattern for c in ["*", "?", "[", "]"]):
        path = Path(pattern)
        if not path.exists():
            raise FileNotFoundError(f"Document not found: {pattern}")
        if not path.is_file():
            raise ValueError(f"Path is not a file: {pattern}")
        return [load_document(path)]

    docs = []
    for match_str in sorted(glob(pattern, recursive=True)):
        path = Path(match_str)
        if not path.is_file() or path.suffix.lower() not in TEXT_SUFFIXES:
            continue
        doc = load_document(path)
        if not doc.content.strip():
            print(f"Warning: Skipping empty document {path}")
            continue
        docs.append(doc)

    if not docs:
        raise FileNotFoundError(f"No text documents found matching: {pattern}")
    return docs


def write_artifact(artifacts_dir: Path, run_id: str, name: str, payload: Dict[str, Any]) -> Path:
    out_dir = artifacts_dir / run_id
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{name}.json"
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    return out_path
