"""
Prompt assembly for copy generation.

Everything here is pure: given a request variant, the product type's
instructions and optional attachments, it returns the chat messages to send.
"""
from typing import Any

from copyfixer.agent.artifacts import (
    ImproveCopyRequest,
    ScreenshotPayload,
    SuggestPatternRequest,
    WriteNewRequest,
)
from copyfixer.agent.prompts.copy_modes import (
    IMPROVE_COPY_SYSTEM_PROMPT,
    IMPROVE_COPY_USER_PROMPT,
    LINE_FORMAT_RULE,
    REFERENCE_FILES_MESSAGE_HEADER,
    REFERENCE_FILES_SYSTEM_SUFFIX,
    SUGGEST_PATTERN_SYSTEM_PROMPT,
    SUGGEST_PATTERN_USER_PROMPT,
    SUGGEST_PATTERN_WITH_COPY_USER_PROMPT,
    UNKNOWN_CONTEXT_VALUE,
    WRITE_NEW_SYSTEM_PROMPT,
    WRITE_NEW_USER_PROMPT,
    WRITE_NEW_WITH_COPY_USER_PROMPT,
)
from copyfixer.core.config import settings

CopyRequest = ImproveCopyRequest | WriteNewRequest | SuggestPatternRequest


def _context_value(value: str | None) -> str:
    return value or UNKNOWN_CONTEXT_VALUE


def _improve_copy_system(request: CopyRequest, instructions: str) -> str:
    return IMPROVE_COPY_SYSTEM_PROMPT.format(instructions=instructions, line_rule=LINE_FORMAT_RULE)


def _write_new_system(request: WriteNewRequest, instructions: str) -> str:
    return WRITE_NEW_SYSTEM_PROMPT.format(
        instructions=instructions,
        user_type=_context_value(request.user_type),
        error_type=_context_value(request.error_type),
        can_fix=_context_value(request.can_fix),
        surface=_context_value(request.surface),
        line_rule=LINE_FORMAT_RULE,
    )


def _suggest_pattern_system(request: SuggestPatternRequest, instructions: str) -> str:
    return SUGGEST_PATTERN_SYSTEM_PROMPT.format(
        instructions=instructions,
        user_type=_context_value(request.user_type),
        surface=_context_value(request.surface),
    )


def _improve_copy_user(request: CopyRequest) -> str:
    return IMPROVE_COPY_USER_PROMPT.format(input_copy=request.input_copy)


def _write_new_user(request: WriteNewRequest) -> str:
    if request.input_copy:
        return WRITE_NEW_WITH_COPY_USER_PROMPT.format(input_copy=request.input_copy)
    return WRITE_NEW_USER_PROMPT


def _suggest_pattern_user(request: SuggestPatternRequest) -> str:
    if request.input_copy:
        return SUGGEST_PATTERN_WITH_COPY_USER_PROMPT.format(input_copy=request.input_copy)
    return SUGGEST_PATTERN_USER_PROMPT


_TEMPLATES = {
    "improve_copy": (_improve_copy_system, _improve_copy_user),
    "write_new": (_write_new_system, _write_new_user),
    "suggest_pattern": (_suggest_pattern_system, _suggest_pattern_user),
}


def _templates_for(mode: str):
    # Unknown modes use the improve_copy templates.
    return _TEMPLATES.get(mode, _TEMPLATES["improve_copy"])


def resolve_reference_url(url: str, base_url: str | None = None) -> str:
    if url.startswith(("http://", "https://")):
        return url
    base = (base_url or settings.app_base_url).rstrip("/")
    return f"{base}/{url.lstrip('/')}"


def build_system_prompt(request: CopyRequest, instructions: str, *, has_reference_files: bool = False) -> str:
    system_builder, _ = _templates_for(request.mode)
    prompt = system_builder(request, instructions)
    if has_reference_files:
        prompt += REFERENCE_FILES_SYSTEM_SUFFIX
    return prompt


def build_user_prompt(request: CopyRequest) -> str:
    _, user_builder = _templates_for(request.mode)
    return user_builder(request)


def build_reference_files_message(reference_file_urls: list[str], base_url: str | None = None) -> str:
    lines = [REFERENCE_FILES_MESSAGE_HEADER]
    lines.extend(
        f"{index}. {resolve_reference_url(url, base_url)}"
        for index, url in enumerate(reference_file_urls, start=1)
    )
    return "\n".join(lines)


def compose_messages(
    request: CopyRequest,
    instructions: str,
    *,
    reference_file_urls: list[str] | None = None,
    screenshot: ScreenshotPayload | None = None,
    base_url: str | None = None,
) -> list[dict[str, Any]]:
    """Return the ordered, role-tagged messages for a chat completion call."""
    reference_file_urls = [url for url in reference_file_urls or [] if url]
    has_reference_files = bool(reference_file_urls)

    messages: list[dict[str, Any]] = [
        {
            "role": "system",
            "content": build_system_prompt(
                request, instructions, has_reference_files=has_reference_files
            ),
        }
    ]

    if has_reference_files:
        messages.append(
            {"role": "user", "content": build_reference_files_message(reference_file_urls, base_url)}
        )

    user_text = build_user_prompt(request)
    if screenshot is not None:
        content: str | list[dict[str, Any]] = [
            {"type": "text", "text": user_text},
            {"type": "image_url", "image_url": {"url": screenshot.data_url}},
        ]
    else:
        content = user_text
    messages.append({"role": "user", "content": content})
    return messages
