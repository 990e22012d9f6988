# src/hybrid_rag/agents/encode.py
"""Decoding of JSON objects emitted by language models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, Type, TypeVar

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import PydanticOutputParser
from pydantic import BaseModel

from hybrid_rag.utils import trim_for_log

M = TypeVar("M", bound=BaseModel)


@dataclass
class DecodeResult(Generic[M]):
    value: Optional[M] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def decode_json(raw: str, model: Type[M]) -> DecodeResult[M]:
    """Parse raw model output (optionally ```json fenced) into model; never raises."""
    if not (raw or "").strip():
        return DecodeResult(error="empty model output")
    parser = PydanticOutputParser(pydantic_object=model)
    try:
        return DecodeResult(value=parser.parse(raw))
    except OutputParserException as e:
        first_line = str(e).strip().splitlines()[0] if str(e).strip() else type(e).__name__
        return DecodeResult(error=trim_for_log(first_line, 200))
