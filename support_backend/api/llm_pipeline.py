"""
Reply Generation: Prompt Assembly • Chat Completion • Provider Error Mapping
===========================================================================

Purpose
-------
This module wires the support agent to the chat-completion provider:
- Renders the system prompt from the knowledge base once per generator.
- Builds the provider message list (system prompt, history, new user turn).
- Invokes LangChain `ChatOpenAI` once per reply, under a hard deadline.
- Maps provider failures to the closed `LLMError` taxonomy.

Key Components
--------------
- classify_provider_error : Translate an openai / asyncio exception into an `LLMError`.
- ReplyGenerator          : `generate_reply(history, user_message)` and `check_health()`.

Configuration (settings)
------------------------
- settings.OPENAI_API_KEY          : provider credential; absent → `MissingApiKeyError`.
- settings.OPENAI_MODEL            : chat model name (e.g. "gpt-3.5-turbo").
- settings.MAX_TOKENS              : output token cap.
- settings.LLM_TEMPERATURE / LLM_PRESENCE_PENALTY / LLM_FREQUENCY_PENALTY : sampling.
- settings.LLM_TIMEOUT_SECONDS     : deadline for one call → `LLMTimeoutError`.
- settings.KNOWLEDGE_BASE_PATH     : optional FAQ override.

Caution
-------
- No retries: a single attempt either succeeds or raises.
- The provider's own retry loop is disabled (`max_retries=0`).
"""

import asyncio
import logging
from typing import Optional, Sequence

import openai
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI
from openai import AsyncOpenAI

from support_backend.api.prompt_utilities import (
    build_messages,
    lc_text_from_content,
    load_knowledge_base,
    load_store_info,
    render_system_prompt,
)
from support_backend.database.config.config import Settings
from support_backend.database.entities.messages import Message
from support_backend.exceptions import (
    EmptyResponseError,
    InvalidApiKeyError,
    LLMError,
    LLMTimeoutError,
    MissingApiKeyError,
    ProviderAPIError,
    RateLimitError,
    ServiceUnavailableError,
    UnexpectedLLMError,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_STATUSES = (500, 502, 503)


def classify_provider_error(error: BaseException) -> LLMError:
    """
    Map a failure raised while calling the provider to an `LLMError`.

    Args:
        error: Exception raised by `ChatOpenAI.ainvoke` or by the deadline.

    Returns:
        LLMError: The taxonomy member for `error`; `error` itself if it already is one.
    """
    if isinstance(error, LLMError):
        return error
    if isinstance(error, (asyncio.TimeoutError, TimeoutError, openai.APITimeoutError)):
        return LLMTimeoutError()
    if isinstance(error, openai.APIConnectionError):
        return ServiceUnavailableError()
    if isinstance(error, openai.APIStatusError):
        status = error.status_code
        if status == 401:
            return InvalidApiKeyError()
        if status == 429:
            return RateLimitError()
        if status in UNAVAILABLE_STATUSES:
            return ServiceUnavailableError()
        return ProviderAPIError(f"OpenAI API error: {error.message}", status_code=status)
    return UnexpectedLLMError()


class ReplyGenerator:
    """
    Support-agent reply generator backed by an OpenAI chat model.

    Args:
        settings (Settings): Provider credentials, sampling parameters and deadline.
        chat_model (BaseChatModel | None): Model to call. Built lazily from settings when omitted.
        system_prompt (str | None): Pre-rendered system prompt. Rendered from the knowledge
            base (packaged or `settings.KNOWLEDGE_BASE_PATH`) when omitted.
        health_client (AsyncOpenAI | None): Client used by `check_health`.
    """

    def __init__(
        self,
        settings: Settings,
        chat_model: Optional[BaseChatModel] = None,
        system_prompt: Optional[str] = None,
        health_client: Optional[AsyncOpenAI] = None,
    ):
        self.settings = settings
        self.system_prompt = system_prompt or render_system_prompt(
            load_knowledge_base(settings.KNOWLEDGE_BASE_PATH), load_store_info()
        )
        self._model = chat_model
        self._health_client = health_client

    @property
    def model(self) -> BaseChatModel:
        if self._model is None:
            self._model = ChatOpenAI(
                model=self.settings.OPENAI_MODEL,
                api_key=self.settings.OPENAI_API_KEY,
                temperature=self.settings.LLM_TEMPERATURE,
                max_tokens=self.settings.MAX_TOKENS,
                presence_penalty=self.settings.LLM_PRESENCE_PENALTY,
                frequency_penalty=self.settings.LLM_FREQUENCY_PENALTY,
                timeout=self.settings.LLM_TIMEOUT_SECONDS,
                max_retries=0,
            )
        return self._model

    async def generate_reply(self, history: Sequence[Message], user_message: str) -> str:
        """
        Produce the agent's reply to `user_message`.

        Args:
            history (Sequence[Message]): Prior turns of the conversation, oldest first.
            user_message (str): Sanitized text of the new user turn.

        Returns:
            str: The trimmed reply text.

        Raises:
            LLMError: One of the taxonomy members; never a raw provider exception.
        """
        if not self.settings.OPENAI_API_KEY:
            raise MissingApiKeyError()

        messages = build_messages(self.system_prompt, history, user_message)

        try:
            response = await asyncio.wait_for(
                self.model.ainvoke(messages),
                timeout=self.settings.LLM_TIMEOUT_SECONDS,
            )
        except Exception as e:
            mapped = classify_provider_error(e)
            logger.warning("Reply generation failed: %s (%s)", mapped.code, type(e).__name__)
            raise mapped from e

        reply = lc_text_from_content(getattr(response, "content", None)).strip()
        if not reply:
            logger.warning("Reply generation failed: %s", EmptyResponseError.code)
            raise EmptyResponseError()
        return reply

    async def check_health(self) -> bool:
        """
        Probe provider reachability with a model-listing call.

        Returns:
            bool: False when no credential is configured or the call fails.
        """
        if not self.settings.OPENAI_API_KEY:
            return False
        if self._health_client is None:
            self._health_client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY,
                timeout=self.settings.LLM_TIMEOUT_SECONDS,
                max_retries=0,
            )
        try:
            await self._health_client.models.list()
            return True
        except openai.OpenAIError as e:
            logger.warning("LLM health check failed: %s", type(e).__name__)
            return False

    async def aclose(self) -> None:
        """Close the HTTP client opened by `check_health`, if any."""
        if self._health_client is not None:
            await self._health_client.close()
            self._health_client = None
