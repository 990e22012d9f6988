# src/hybrid_rag/agents/llm.py
"""Chat model plumbing shared by the agents."""

from __future__ import annotations

from typing import Any, Dict

from langchain_core.messages import SystemMessage
from langchain_core.prompts import ChatPromptTemplate

from hybrid_rag.utils import message_text


def fill_placeholders(text: str, **values: Any) -> str:
    """Replace {name} placeholders; every other brace is left as written."""
    for name, value in values.items():
        text = text.replace("{" + name + "}", str(value))
    return text


def build_prompt(system_prompt: str, user_template: str, **system_values: Any) -> ChatPromptTemplate:
    """System text is sent literally after filling system_values; the human turn is a template."""
    return ChatPromptTemplate.from_messages(
        [
            SystemMessage(content=fill_placeholders(system_prompt, **system_values)),
            ("human", user_template),
        ]
    )


def invoke_text(llm, prompt: ChatPromptTemplate, values: Dict[str, Any]) -> str:
    """Format prompt with values, call the model, return the response text."""
    messages = prompt.format_messages(**values)
    response = llm.invoke(messages)
    return message_text(response)
