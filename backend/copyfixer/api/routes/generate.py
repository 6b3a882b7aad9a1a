import base64
import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, File, Form, Request, Response, UploadFile
from sqlalchemy.exc import SQLAlchemyError

from copyfixer import crud
from copyfixer.agent.artifacts import ScreenshotPayload, parse_generation_request
from copyfixer.agent.suggestion_agent import SuggestionInput
from copyfixer.api.deps import SessionDep, SuggestionAgentDep
from copyfixer.core.config import settings
from copyfixer.errors import ConfigurationError, ProcessingError, StorageError, ValidationError
from copyfixer.models import ProductType, SubmissionCreate, SuggestionsPublic

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_SCREENSHOT_BYTES = 5 * 1024 * 1024


def _ensure_configured() -> None:
    if not settings.LLM_API_KEY:
        raise ConfigurationError("AI service API key not configured. Please check environment variables.")
    if not settings.DATABASE_URL:
        raise ConfigurationError("Database configuration incomplete. Please check environment variables.")


def _load_product_type(session: SessionDep, product_type_id: str) -> ProductType:
    try:
        parsed_id = uuid.UUID(product_type_id)
    except ValueError as exc:
        raise ValidationError("Invalid product type") from exc
    try:
        product_type = crud.get_product_type(session=session, product_type_id=parsed_id)
    except SQLAlchemyError as exc:
        logger.error("Database error loading product type %s: %s", product_type_id, exc)
        raise StorageError(f"Database error: {exc}") from exc
    if product_type is None:
        raise ValidationError("Invalid product type")
    return product_type


def _check_screenshot(screenshot: UploadFile | None) -> UploadFile | None:
    # An empty file part means no screenshot was attached.
    if screenshot is None or not screenshot.size:
        return None
    content_type = screenshot.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError("Screenshot must be an image file")
    if screenshot.size > MAX_SCREENSHOT_BYTES:
        raise ValidationError("Screenshot must be less than 5MB")
    return screenshot


async def _encode_screenshot(screenshot: UploadFile) -> ScreenshotPayload:
    try:
        data = await screenshot.read()
    except (OSError, ValueError) as exc:
        raise ProcessingError(f"Failed to process screenshot: {exc}") from exc
    if len(data) > MAX_SCREENSHOT_BYTES:
        raise ValidationError("Screenshot must be less than 5MB")
    return ScreenshotPayload(
        content_type=screenshot.content_type or "image/jpeg",
        base64_data=base64.b64encode(data).decode("ascii"),
    )


def _resolve_user_session(request: Request) -> tuple[str, bool]:
    """Return the anonymous session id and whether it was freshly minted."""
    existing = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if existing:
        try:
            return str(uuid.UUID(existing)), False
        except ValueError:
            logger.info("Ignoring malformed session cookie")
    return str(uuid.uuid4()), True


@router.post("/generate", response_model=SuggestionsPublic)
async def generate_suggestions(
    request: Request,
    response: Response,
    session: SessionDep,
    agent: SuggestionAgentDep,
    mode: Annotated[str | None, Form()] = None,
    product_type_id: Annotated[str | None, Form(alias="productTypeId")] = None,
    bad_copy: Annotated[str | None, Form(alias="badCopy")] = None,
    input_copy: Annotated[str | None, Form(alias="inputCopy")] = None,
    user_type: Annotated[str | None, Form(alias="userType")] = None,
    error_type: Annotated[str | None, Form(alias="errorType")] = None,
    can_fix: Annotated[str | None, Form(alias="canFix")] = None,
    surface: Annotated[str | None, Form()] = None,
    screenshot: Annotated[UploadFile | None, File()] = None,
) -> SuggestionsPublic:
    """
    Generate up to three copy suggestions for the given mode and product type,
    then log the submission against the caller's anonymous session.
    """
    _ensure_configured()

    generation_request = parse_generation_request(
        {
            "mode": mode,
            "product_type_id": product_type_id,
            "input_copy": bad_copy or input_copy or "",
            "user_type": user_type,
            "error_type": error_type,
            "can_fix": can_fix,
            "surface": surface,
        }
    )
    screenshot = _check_screenshot(screenshot)
    logger.info(
        "Generate request: mode=%s product_type=%s copy_length=%s screenshot=%s",
        generation_request.mode,
        generation_request.product_type_id,
        len(generation_request.input_copy),
        screenshot is not None,
    )

    product_type = _load_product_type(session, generation_request.product_type_id)
    screenshot_payload = await _encode_screenshot(screenshot) if screenshot is not None else None
    reference_file_urls = crud.reference_file_urls_of(product_type=product_type)

    suggestions = await agent.run(
        SuggestionInput(
            request=generation_request,
            instructions=product_type.instructions,
            reference_file_urls=reference_file_urls,
            screenshot=screenshot_payload,
        )
    )

    user_session, is_new_session = _resolve_user_session(request)
    if is_new_session:
        response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=user_session,
            max_age=settings.SESSION_COOKIE_MAX_AGE_SECONDS,
            httponly=True,
            secure=settings.ENVIRONMENT == "production",
            samesite="lax",
        )

    try:
        crud.create_submission(
            session=session,
            submission_in=SubmissionCreate(
                input_copy=generation_request.input_copy,
                product_type_id=product_type.id,
                suggestions=suggestions,
                has_screenshot=screenshot_payload is not None,
                user_session=user_session,
            ),
        )
    except SQLAlchemyError:
        # History is secondary; the suggestions are still returned.
        session.rollback()
        logger.exception("Failed to store submission for product type %s", product_type.id)

    return SuggestionsPublic(suggestions=suggestions)
