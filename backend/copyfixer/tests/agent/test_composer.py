import pytest

from copyfixer.agent.artifacts import (
    ImproveCopyRequest,
    ScreenshotPayload,
    SuggestPatternRequest,
    WriteNewRequest,
)
from copyfixer.agent.composer import (
    build_system_prompt,
    compose_messages,
    resolve_reference_url,
)

INSTRUCTIONS = "Speak like a friendly {bank} teller. Never say 'oops'."


@pytest.mark.parametrize(
    "request_obj",
    [
        ImproveCopyRequest(product_type_id="pt", input_copy="Oops! Something went wrong."),
        WriteNewRequest(product_type_id="pt", user_type="admin", error_type="timeout"),
        SuggestPatternRequest(product_type_id="pt", surface="modal"),
    ],
)
def test_system_prompt_contains_instructions_verbatim(request_obj):
    messages = compose_messages(request_obj, INSTRUCTIONS)

    assert messages[0]["role"] == "system"
    assert INSTRUCTIONS in messages[0]["content"]


def test_improve_copy_embeds_literal_input():
    request = ImproveCopyRequest(product_type_id="pt", input_copy="Oops! Something went wrong.")

    messages = compose_messages(request, INSTRUCTIONS)

    assert len(messages) == 2
    assert "improving existing UI copy" in messages[0]["content"]
    assert messages[1] == {
        "role": "user",
        "content": 'Please improve this UI copy: "Oops! Something went wrong."',
    }


def test_write_new_lists_context_and_defaults_unknown():
    request = WriteNewRequest(product_type_id="pt", user_type="first-time buyer", can_fix="yes")

    system = compose_messages(request, INSTRUCTIONS)[0]["content"]

    assert "writing new error messages" in system
    assert "- User type: first-time buyer" in system
    assert "- Error type: unknown" in system
    assert "- Can user fix this: yes" in system
    assert "- Display surface: unknown" in system


def test_write_new_user_message_echoes_existing_copy_only_when_present():
    without_copy = compose_messages(WriteNewRequest(product_type_id="pt"), INSTRUCTIONS)
    with_copy = compose_messages(
        WriteNewRequest(product_type_id="pt", input_copy="Error 500"), INSTRUCTIONS
    )

    assert without_copy[-1]["content"] == "Please write new error message copy for this context."
    assert 'Current copy (if any): "Error 500"' in with_copy[-1]["content"]


def test_suggest_pattern_asks_for_named_patterns():
    request = SuggestPatternRequest(product_type_id="pt", user_type="operator", surface="dashboard")

    messages = compose_messages(request, INSTRUCTIONS)

    assert "UX designer" in messages[0]["content"]
    assert "Pattern name" in messages[0]["content"]
    assert "- Display surface: dashboard" in messages[0]["content"]
    assert "design patterns" in messages[-1]["content"]


def test_unknown_mode_falls_back_to_improve_copy_templates():
    request = ImproveCopyRequest.model_construct(
        mode="rewrite_everything", product_type_id="pt", input_copy="Bad copy"
    )

    system = build_system_prompt(request, INSTRUCTIONS)

    assert system == build_system_prompt(
        ImproveCopyRequest(product_type_id="pt", input_copy="Bad copy"), INSTRUCTIONS
    )


def test_reference_files_extend_system_prompt_and_add_url_message():
    request = ImproveCopyRequest(product_type_id="pt", input_copy="Bad copy")

    messages = compose_messages(
        request,
        INSTRUCTIONS,
        reference_file_urls=[
            "https://storage.test/reference-files/reference-docs/a-guide.pdf",
            "/files/tone.png",
        ],
        base_url="https://copyfixer.test",
    )

    assert len(messages) == 3
    assert "Reference documents have been provided" in messages[0]["content"]
    assert messages[1]["role"] == "user"
    assert "1. https://storage.test/reference-files/reference-docs/a-guide.pdf" in messages[1]["content"]
    assert "2. https://copyfixer.test/files/tone.png" in messages[1]["content"]
    assert messages[2]["content"] == 'Please improve this UI copy: "Bad copy"'


def test_no_reference_files_means_no_reference_instruction():
    request = ImproveCopyRequest(product_type_id="pt", input_copy="Bad copy")

    messages = compose_messages(request, INSTRUCTIONS, reference_file_urls=[])

    assert "Reference documents" not in messages[0]["content"]
    assert len(messages) == 2


def test_image_turns_user_message_into_two_parts():
    request = ImproveCopyRequest(product_type_id="pt", input_copy="Bad copy")
    screenshot = ScreenshotPayload(content_type="image/png", base64_data="aGVsbG8=")

    content = compose_messages(request, INSTRUCTIONS, screenshot=screenshot)[-1]["content"]

    assert content == [
        {"type": "text", "text": 'Please improve this UI copy: "Bad copy"'},
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,aGVsbG8="}},
    ]


def test_resolve_reference_url_passes_absolute_urls_through():
    assert resolve_reference_url("https://cdn.test/a.pdf", "https://app.test") == "https://cdn.test/a.pdf"
    assert resolve_reference_url("docs/a.pdf", "https://app.test/") == "https://app.test/docs/a.pdf"
