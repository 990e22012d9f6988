# src/hybrid_rag/utils.py
"""Shared helpers: observability, node logging, log trimming."""

import functools
import logging
import os
from typing import Any, Callable, Dict

OBSERVE_ENABLED = os.getenv("LANGFUSE_ENABLED", "1") == "1"

if OBSERVE_ENABLED:
    from langfuse import observe
else:

    def observe(fn=None, **kwargs):
        def _wrap(f):
            return f

        return _wrap(fn) if fn else _wrap


def with_node_logging(node_name: str) -> Callable:
    """Decorator adding consistent logging to pipeline nodes.

    Failures are logged with the node name and re-raised so the run aborts
    without a partial answer.

    Args:
        node_name: Name of the node for log lines

    Example:
        @with_node_logging("research")
        def research(state: PipelineState) -> Dict[str, Any]:
            ...
            return {"evidence": evidence}
    """

    def decorator(func: Callable) -> Callable:
        logger = logging.getLogger(func.__module__)

        @functools.wraps(func)
        def wrapper(state: Dict[str, Any]) -> Dict[str, Any]:
            try:
                logger.debug(f"Starting {node_name}")
                result = func(state)
                logger.debug(f"Completed {node_name}: {len(result or {})} fields returned")
                return result
            except Exception as e:
                logger.exception(f"Error in {node_name}: {e}")
                raise

        return wrapper

    return decorator


def trim_for_log(text: Any, limit: int = 120) -> str:
    """Shorten text for single-line log output."""
    s = " ".join(str(text or "").split())
    if len(s) <= limit:
        return s
    return s[: max(0, limit - 3)] + "..."


def message_text(message: Any) -> str:
    """Extract plain text from a chat model response."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return "" if content is None else str(content)
