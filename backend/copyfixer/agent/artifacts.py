import logging
from typing import Annotated, Any, Literal, Union, get_args

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from copyfixer.errors import ValidationError as RequestValidationFailure

logger = logging.getLogger(__name__)

GenerationMode = Literal["improve_copy", "write_new", "suggest_pattern"]
DEFAULT_MODE: GenerationMode = "improve_copy"


class ImproveCopyRequest(BaseModel):
    """Rewrite existing copy; the copy itself is mandatory."""
    mode: Literal["improve_copy"] = "improve_copy"
    product_type_id: str = Field(min_length=1)
    input_copy: str = Field(min_length=1)


class WriteNewRequest(BaseModel):
    """Write a new error message from structured context."""
    mode: Literal["write_new"] = "write_new"
    product_type_id: str = Field(min_length=1)
    input_copy: str = ""
    user_type: str | None = None
    error_type: str | None = None
    can_fix: str | None = None
    surface: str | None = None


class SuggestPatternRequest(BaseModel):
    """Recommend display patterns instead of copy."""
    mode: Literal["suggest_pattern"] = "suggest_pattern"
    product_type_id: str = Field(min_length=1)
    input_copy: str = ""
    user_type: str | None = None
    surface: str | None = None


GenerationRequest = Annotated[
    Union[ImproveCopyRequest, WriteNewRequest, SuggestPatternRequest],
    Field(discriminator="mode"),
]


class ScreenshotPayload(BaseModel):
    """A screenshot already encoded for inline transmission."""
    content_type: str
    base64_data: str

    @property
    def data_url(self) -> str:
        return f"data:{self.content_type};base64,{self.base64_data}"


_generation_request_adapter: TypeAdapter[GenerationRequest] = TypeAdapter(GenerationRequest)

# Field-level messages for the mode-specific required inputs.
REQUIRED_FIELD_MESSAGES = {
    "product_type_id": "Product type is required",
    "input_copy": "Original copy is required for improvement mode",
}


def parse_generation_request(fields: dict[str, Any]) -> ImproveCopyRequest | WriteNewRequest | SuggestPatternRequest:
    """
    Build the mode-specific request variant from loosely typed form fields.

    A missing or unrecognized ``mode`` is treated as ``improve_copy``.
    """
    data = {key: value for key, value in fields.items() if value is not None}
    mode = data.get("mode") or DEFAULT_MODE
    if mode not in get_args(GenerationMode):
        logger.warning("Unrecognized generation mode %r; falling back to %s", mode, DEFAULT_MODE)
        mode = DEFAULT_MODE
    data["mode"] = mode

    if not data.get("product_type_id"):
        raise RequestValidationFailure(REQUIRED_FIELD_MESSAGES["product_type_id"])

    try:
        return _generation_request_adapter.validate_python(data)
    except PydanticValidationError as exc:
        for error in exc.errors():
            field = error["loc"][-1] if error["loc"] else None
            if field in REQUIRED_FIELD_MESSAGES:
                raise RequestValidationFailure(REQUIRED_FIELD_MESSAGES[field]) from exc
        raise RequestValidationFailure(f"Invalid generation request: {exc.errors()[0]['msg']}") from exc
