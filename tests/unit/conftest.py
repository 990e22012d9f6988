# tests/unit/conftest.py
"""Stub collaborators shared by all unit tests."""

import os
from typing import List

import pytest
from langchain_core.embeddings import Embeddings
from langchain_core.messages import AIMessage

# Disable Langfuse for unit tests
os.environ["LANGFUSE_ENABLED"] = "0"

KEYWORD_SPACE = ["shipping", "policy", "return", "timeline"]


class StubLLM:
    """Chat model stand-in returning scripted responses.

    A response that is an Exception instance is raised instead of returned.
    The last response repeats once the script is exhausted.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0
        self.messages = []

    def invoke(self, messages, *args, **kwargs):
        self.calls += 1
        self.messages.append(messages)
        idx = min(self.calls - 1, len(self.responses) - 1)
        resp = self.responses[idx]
        if isinstance(resp, Exception):
            raise resp
        return AIMessage(content=resp)


class KeywordEmbeddings(Embeddings):
    """One dimension per keyword: 1.0 when the text mentions it."""

    def __init__(self, keywords: List[str] = None):
        self.keywords = keywords or KEYWORD_SPACE

    def embed_query(self, text: str) -> List[float]:
        lower = text.lower()
        return [1.0 if kw in lower else 0.0 for kw in self.keywords]

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        return [self.embed_query(t) for t in texts]


class FailingEmbeddings(Embeddings):
    def embed_query(self, text: str) -> List[float]:
        raise RuntimeError("embedding service unavailable")

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        raise RuntimeError("embedding service unavailable")


@pytest.fixture
def stub_llm():
    """Factory for scripted chat models."""
    return StubLLM


@pytest.fixture
def keyword_embeddings():
    return KeywordEmbeddings()


@pytest.fixture
def failing_embeddings():
    return FailingEmbeddings()
