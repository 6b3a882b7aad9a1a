from unittest.mock import AsyncMock

import pytest

from copyfixer.agent.artifacts import ImproveCopyRequest, ScreenshotPayload, WriteNewRequest
from copyfixer.agent.llm_client import NO_SUGGESTIONS_PLACEHOLDER
from copyfixer.agent.suggestion_agent import SuggestionAgent, SuggestionInput
from copyfixer.errors import RateLimitError
from copyfixer.tests.conftest import make_completion


@pytest.mark.asyncio
async def test_suggestion_agent_returns_split_lines(mock_completions):
    mock_completions.create = AsyncMock(
        return_value=make_completion("We couldn't save your changes.\nTry saving again.\n")
    )

    agent = SuggestionAgent()
    result = await agent.run(
        SuggestionInput(
            request=ImproveCopyRequest(product_type_id="pt", input_copy="Save failed"),
            instructions="Be brief.",
        )
    )

    assert result == ["We couldn't save your changes.", "Try saving again."]
    messages = mock_completions.create.call_args.kwargs["messages"]
    assert "Be brief." in messages[0]["content"]
    assert messages[-1]["content"] == 'Please improve this UI copy: "Save failed"'


@pytest.mark.asyncio
async def test_suggestion_agent_sends_reference_list_and_screenshot(mock_completions):
    agent = SuggestionAgent()
    await agent.run(
        SuggestionInput(
            request=WriteNewRequest(product_type_id="pt", error_type="timeout"),
            instructions="Be brief.",
            reference_file_urls=["https://storage.test/reference-files/reference-docs/x-guide.pdf"],
            screenshot=ScreenshotPayload(content_type="image/webp", base64_data="AAAA"),
        )
    )

    messages = mock_completions.create.call_args.kwargs["messages"]
    assert len(messages) == 3
    assert "x-guide.pdf" in messages[1]["content"]
    assert messages[2]["content"][1]["image_url"]["url"] == "data:image/webp;base64,AAAA"


@pytest.mark.asyncio
async def test_empty_model_output_becomes_placeholder(mock_completions):
    mock_completions.create = AsyncMock(return_value=make_completion(""))

    result = await SuggestionAgent().run(
        SuggestionInput(
            request=ImproveCopyRequest(product_type_id="pt", input_copy="Save failed"),
            instructions="Be brief.",
        )
    )

    assert result == [NO_SUGGESTIONS_PLACEHOLDER]


@pytest.mark.asyncio
async def test_provider_errors_propagate(mock_completions):
    agent = SuggestionAgent()
    agent.llm.generate_suggestions = AsyncMock(side_effect=RateLimitError())

    with pytest.raises(RateLimitError):
        await agent.run(
            SuggestionInput(
                request=ImproveCopyRequest(product_type_id="pt", input_copy="Save failed"),
                instructions="Be brief.",
            )
        )
