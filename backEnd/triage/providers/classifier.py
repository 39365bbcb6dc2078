"""LangChain chat-model classifier used by the adjudicators."""

from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from ..config.llm_providers import get_llm


class LangChainClassifier:
    """
    Sends one system + user prompt pair to a chat model and returns its text.

    The model is loaded lazily so a missing API key only surfaces when a
    classification is actually attempted (and is then absorbed by the
    adjudicator's fallback).
    """

    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        model_override: Optional[str] = None,
    ):
        self._llm = llm
        self._model_override = model_override

    @property
    def llm(self) -> BaseChatModel:
        """Get the LLM (lazy loaded)."""
        if self._llm is None:
            self._llm = get_llm(self._model_override)
        return self._llm

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ]
        response = await self.llm.ainvoke(messages)
        content = response.content
        return content if isinstance(content, str) else str(content)
