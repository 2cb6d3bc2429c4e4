"""Completion providers for the note stage.

``create_llm()`` picks the implementation named by ``settings.llm_provider``.
"""

from .base import BaseLLM

__all__ = ["BaseLLM", "create_llm"]


def create_llm(provider: str, **kwargs) -> BaseLLM:
    """Build the completion provider named ``provider``.

    Args:
        provider: "openai", "claude" or "ollama".
        **kwargs: Passed to the provider constructor (model, timeout, ...).

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "openai":
        from .openai import OpenAILLM

        return OpenAILLM(**kwargs)
    elif provider == "claude":
        from .claude import ClaudeLLM

        return ClaudeLLM(**kwargs)
    elif provider == "ollama":
        from .ollama import OllamaLLM

        return OllamaLLM(**kwargs)
    else:
        raise ValueError(f"Unknown LLM provider: {provider}")
