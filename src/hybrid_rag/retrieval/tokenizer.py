# src/hybrid_rag/retrieval/tokenizer.py
"""Whitespace / punctuation tokenizer used to size chunks.

Rules:
- letter and digit runs form one token
- each CJK ideograph is its own token
- every other non-space character is its own token
"""

from __future__ import annotations

import re
from typing import List, Tuple

_HAN = "\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff"

_TOKEN_RE = re.compile(rf"[{_HAN}]|(?:(?![{_HAN}])[^\W_])+|\S")


class SimpleTokenizer:
    def spans(self, text: str) -> List[Tuple[int, int]]:
        """(start, end) offsets of every token in text."""
        return [m.span() for m in _TOKEN_RE.finditer(text or "")]

    def tokenize(self, text: str) -> List[str]:
        return _TOKEN_RE.findall(text or "")

    def count_tokens(self, text: str) -> int:
        return sum(1 for _ in _TOKEN_RE.finditer(text or ""))


DEFAULT_TOKENIZER = SimpleTokenizer()
