# src/hybrid_rag/retrieval/preprocess.py
"""Text clean-up applied to documents before chunking."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable, Sequence

from hybrid_rag.documents import Document

_CHAR_FIXES = {
    "\u2014": "-",
    "\u2013": "-",
    "\u00b7": ".",
    "\u2022": "-",
}

_SPACES_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")

WEB_NOISE_MARKERS: Sequence[str] = (
    "Cookie",
    "Privacy Policy",
    "All rights reserved",
    "相关链接",
    "你可能还喜欢",
    "热门文章",
    "版权所有",
    "隐私政策",
    "广告",
)


def clean_basic(text: str) -> str:
    """Drop control characters, fix ligatures and dashes, collapse spaces and blank lines."""
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text.replace("\r\n", "\n"))
    text = "".join(ch for ch in text if ch in "\n\t" or not unicodedata.category(ch).startswith("C"))
    for src, dst in _CHAR_FIXES.items():
        text = text.replace(src, dst)
    text = _SPACES_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def remove_web_noise(text: str, markers: Iterable[str] = WEB_NOISE_MARKERS) -> str:
    """Drop lines containing any boilerplate marker."""
    markers = tuple(markers)
    return "\n".join(line for line in text.split("\n") if not any(m in line for m in markers))


def remove_duplicate_paragraphs(text: str) -> str:
    """Keep the first occurrence of each blank-line separated paragraph."""
    seen = set()
    out = []
    for para in text.split("\n\n"):
        para = para.strip()
        if not para or para in seen:
            continue
        seen.add(para)
        out.append(para)
    return "\n\n".join(out)


def preprocess_text(text: str) -> str:
    return remove_duplicate_paragraphs(remove_web_noise(clean_basic(text)))


def clean_document(doc: Document) -> Document:
    """Preprocessor for HybridRetrievalEngine: a copy of doc with cleaned content."""
    out = doc.clone()
    out.content = preprocess_text(doc.content)
    return out
