"""
LLM utility functions for the exit readiness workflow.
Centralizes chat model construction and plain-text calls.
"""

import logging
import os
from typing import List, Optional

from langchain_core.messages import BaseMessage
from langchain_openai import ChatOpenAI

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4.1-mini"


def get_llm_with_fallback(
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    **kwargs
) -> ChatOpenAI:
    """
    Create an LLM instance, correcting retired model names.

    Args:
        model: Model name, defaults to NARRATIVE_MODEL
        temperature: Sampling temperature, defaults to NARRATIVE_TEMPERATURE
        max_tokens: Maximum tokens in response, defaults to NARRATIVE_MAX_TOKENS
        **kwargs: Additional parameters for ChatOpenAI

    Returns:
        Configured ChatOpenAI instance
    """
    model = model or os.getenv("NARRATIVE_MODEL", DEFAULT_MODEL)
    if temperature is None:
        temperature = float(os.getenv("NARRATIVE_TEMPERATURE", "0.7"))
    if max_tokens is None:
        max_tokens = int(os.getenv("NARRATIVE_MAX_TOKENS", "4000"))

    # Model name mapping (old names still show up in .env files)
    model_mapping = {
        "gpt-4o-mini": "gpt-4.1-mini",
        "gpt-4o": "gpt-4.1",
        "gpt-4-turbo": "gpt-4.1",
        "gpt-3.5-turbo": "gpt-4.1-nano"
    }

    corrected_model = model_mapping.get(model, model)
    if corrected_model != model:
        logger.info(f"Corrected model name from {model} to {corrected_model}")

    try:
        llm = ChatOpenAI(
            model=corrected_model,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs
        )
        logger.debug(f"Created LLM: {corrected_model} (temp={temperature})")
        return llm
    except Exception as e:
        logger.error(f"Failed to create LLM with model {corrected_model}: {e}")
        logger.info(f"Falling back to {DEFAULT_MODEL}")
        return ChatOpenAI(
            model=DEFAULT_MODEL,
            temperature=temperature,
            max_tokens=max_tokens
        )


def invoke_for_text(llm: ChatOpenAI, messages: List[BaseMessage]) -> str:
    """Call the model and return the stripped text of its reply"""
    response = llm.invoke(messages)
    content = response.content if hasattr(response, "content") else str(response)
    if isinstance(content, list):
        # Content blocks from newer chat models
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return content.strip()


def count_words(text: str) -> int:
    """Whitespace word count"""
    return len([w for w in text.strip().split() if w])
