import logging

from pydantic import BaseModel, Field

from copyfixer.agent.artifacts import (
    ImproveCopyRequest,
    ScreenshotPayload,
    SuggestPatternRequest,
    WriteNewRequest,
)
from copyfixer.agent.base import BaseAgent
from copyfixer.agent.composer import compose_messages
from copyfixer.agent.llm_client import NO_SUGGESTIONS_PLACEHOLDER
from copyfixer.errors import EmptyResponseError

logger = logging.getLogger(__name__)


class SuggestionInput(BaseModel):
    request: ImproveCopyRequest | WriteNewRequest | SuggestPatternRequest = Field(discriminator="mode")
    instructions: str
    reference_file_urls: list[str] = Field(default_factory=list)
    screenshot: ScreenshotPayload | None = None


class SuggestionAgent(BaseAgent[SuggestionInput, list[str]]):
    """
    Composes the prompt for a generation request and turns the model's reply
    into at most three suggestions.
    """

    async def run(self, input_data: SuggestionInput) -> list[str]:
        messages = compose_messages(
            input_data.request,
            input_data.instructions,
            reference_file_urls=input_data.reference_file_urls,
            screenshot=input_data.screenshot,
        )
        try:
            return await self.llm.generate_suggestions(messages)
        except EmptyResponseError as exc:
            # Empty output is a soft failure: the caller still gets a list.
            logger.warning("Model returned no content for %s request: %s", input_data.request.mode, exc)
            return [NO_SUGGESTIONS_PLACEHOLDER]
