import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from copyfixer.core.config import settings
from copyfixer.errors import (
    AuthenticationError,
    ConfigurationError,
    EmptyResponseError,
    NetworkError,
    RateLimitError,
    UpstreamError,
    UpstreamServiceError,
)

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3
NO_SUGGESTIONS_PLACEHOLDER = "Unable to generate suggestions at this time."


def split_suggestions(text: str, limit: int = MAX_SUGGESTIONS) -> list[str]:
    """One suggestion per non-empty line, trimmed, at most ``limit`` of them."""
    lines = [line.strip() for line in (text or "").splitlines()]
    suggestions = [line for line in lines if line][:limit]
    return suggestions or [NO_SUGGESTIONS_PLACEHOLDER]


def _classify_status_error(exc: openai.APIStatusError) -> UpstreamError | AuthenticationError | RateLimitError:
    status = exc.status_code
    status_text = exc.response.reason_phrase if exc.response is not None else None
    if status == 401:
        return AuthenticationError("AI service authentication failed - invalid API key")
    if status == 429:
        return RateLimitError("Rate limit exceeded. Please try again later")
    if status >= 500:
        return UpstreamServiceError(
            "AI service server error - please try again",
            upstream_status=status,
            status_text=status_text,
        )
    return UpstreamError(upstream_status=status, status_text=status_text)


class LLMClient:
    """Chat-completions client for copy suggestions using the OpenAI chat API."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS

        resolved_api_key = api_key or settings.LLM_API_KEY
        if not resolved_api_key:
            logger.error("LLM API key not configured")
            raise ConfigurationError("AI service API key is not configured")

        self.client = AsyncOpenAI(
            base_url=base_url or settings.LLM_BASE_URL,
            api_key=resolved_api_key,
            timeout=timeout or settings.LLM_TIMEOUT_SECONDS,
            max_retries=settings.LLM_MAX_RETRIES if max_retries is None else max_retries,
            default_headers={
                "HTTP-Referer": settings.app_base_url,
                "X-Title": settings.PROJECT_NAME,
            },
        )

    def _chat_completion_kwargs(self) -> dict[str, Any]:
        """Sampling kwargs sent with every chat completion, whatever the model."""
        return {"temperature": self.temperature, "max_tokens": self.max_tokens}

    async def generate_text(self, messages: list[dict[str, Any]]) -> str:
        """Send the messages and return the raw completion text."""
        logger.info(
            "Issuing copy request to model %s (%s messages, image=%s)...",
            self.model_name,
            len(messages),
            any(isinstance(m.get("content"), list) for m in messages),
        )
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                **self._chat_completion_kwargs(),
            )
        except openai.APIStatusError as exc:
            logger.error("LLM provider returned HTTP %s: %s", exc.status_code, exc.message)
            raise _classify_status_error(exc) from exc
        except openai.APIConnectionError as exc:
            logger.error("Unable to reach LLM provider: %s", exc)
            raise NetworkError() from exc
        except openai.APIError as exc:
            logger.error("Unusable response from LLM provider: %s", exc.message)
            raise UpstreamError(f"AI service error: {exc.message}") from exc

        if not getattr(response, "choices", None):
            logger.error("Received 0 choices from %s: %s", self.model_name, response)
            raise EmptyResponseError("No response content from AI service")

        content = response.choices[0].message.content
        if not content:
            logger.error("No content in response from %s", self.model_name)
            raise EmptyResponseError("No response content from AI service")

        logger.info("Received %s characters from %s.", len(content), self.model_name)
        return content

    async def generate_suggestions(self, messages: list[dict[str, Any]]) -> list[str]:
        text = await self.generate_text(messages)
        suggestions = split_suggestions(text)
        logger.info("Copy generation produced %s suggestion(s).", len(suggestions))
        return suggestions
