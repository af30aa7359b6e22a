from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, Optional, Protocol

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from ticket_processor.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "claude"

_OPENAI_SYSTEM_PROMPT = (
    "You are a helpful assistant that extracts structured information from support conversations."
)


class TextCompletionProvider(Protocol):
    """Anything that turns a single prompt into free text."""

    provider: str

    async def complete(self, prompt_text: str) -> str: ...


@lru_cache(maxsize=8)
def _claude_chat_llm(*, model: str, max_tokens: int) -> Any:
    from langchain_anthropic import ChatAnthropic

    if not settings.ANTHROPIC_API_KEY:
        raise RuntimeError("ANTHROPIC_API_KEY is not set; the claude provider is unavailable.")

    return ChatAnthropic(
        model=model,
        api_key=settings.ANTHROPIC_API_KEY,
        max_tokens=max_tokens,
    )


@lru_cache(maxsize=8)
def _openai_chat_llm(*, model: str, temperature: float) -> Any:
    from langchain_openai import ChatOpenAI

    if not settings.OPENAI_API_KEY:
        raise RuntimeError("OPENAI_API_KEY is not set; the openai provider is unavailable.")

    return ChatOpenAI(
        model=model,
        api_key=settings.OPENAI_API_KEY,
        temperature=temperature,
    )


def _claude_llm() -> Any:
    return _claude_chat_llm(model=settings.CLAUDE_MODEL, max_tokens=settings.LLM_MAX_TOKENS)


def _openai_llm() -> Any:
    return _openai_chat_llm(model=settings.OPENAI_MODEL, temperature=settings.OPENAI_TEMPERATURE)


@dataclass(frozen=True)
class ProviderSpec:
    llm_factory: Callable[[], Any]
    system_prompt: Optional[str] = None


PROVIDERS: Dict[str, ProviderSpec] = {
    "claude": ProviderSpec(llm_factory=_claude_llm),
    "openai": ProviderSpec(llm_factory=_openai_llm, system_prompt=_OPENAI_SYSTEM_PROMPT),
}


class ChatModelExtractor:
    """Single-turn completion against one LangChain chat model.

    The chat model is built on first use so a missing API key surfaces as a
    failed extraction rather than a failed startup.
    """

    def __init__(self, provider: str, llm_factory: Callable[[], Any], system_prompt: Optional[str] = None):
        self.provider = provider
        self._llm_factory = llm_factory
        self._system_prompt = system_prompt

    def _build_prompt(self) -> ChatPromptTemplate:
        messages = []
        if self._system_prompt:
            messages.append(("system", self._system_prompt))
        # The transcript goes in as a variable value, so braces inside it are never parsed as placeholders.
        messages.append(("human", "{prompt_text}"))
        return ChatPromptTemplate.from_messages(messages)

    async def complete(self, prompt_text: str) -> str:
        chain = self._build_prompt() | self._llm_factory() | StrOutputParser()
        text = await chain.ainvoke({"prompt_text": prompt_text})
        logger.info("%s completion returned %d chars", self.provider, len(text))
        return text


def build_extractor(provider_name: Optional[str] = None) -> ChatModelExtractor:
    """Resolve the configured provider identifier to an extractor.

    Called once at startup. Unknown identifiers fall back to the default provider.
    """
    name = (provider_name or settings.AI_PROVIDER or DEFAULT_PROVIDER).strip().lower()
    if name not in PROVIDERS:
        logger.warning("Unknown AI_PROVIDER '%s'; falling back to '%s'", name, DEFAULT_PROVIDER)
        name = DEFAULT_PROVIDER

    spec = PROVIDERS[name]
    logger.info("Using '%s' for ticket extraction", name)
    return ChatModelExtractor(name, spec.llm_factory, system_prompt=spec.system_prompt)
