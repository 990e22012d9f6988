# src/hybrid_rag/model.py

import logging
import os

from langchain.chat_models import init_chat_model
from langchain.embeddings import init_embeddings

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "openai:gpt-4.1"
DEFAULT_EMBEDDING_MODEL = "openai:text-embedding-3-small"


def get_default_model():
    model_name = os.getenv("HYBRID_RAG_MODEL", DEFAULT_CHAT_MODEL)
    logger.info(f"Initializing chat model {model_name}")
    model = init_chat_model(
        model=model_name,
        temperature=0.0,
        max_tokens=5000,
    )
    return model


def get_default_embeddings():
    model_name = os.getenv("HYBRID_RAG_EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL)
    logger.info(f"Initializing embeddings {model_name}")
    return init_embeddings(model_name)
