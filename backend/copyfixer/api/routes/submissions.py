import logging
import uuid
from typing import Any

from fastapi import APIRouter, Request

from copyfixer import crud
from copyfixer.api.deps import SessionDep
from copyfixer.core.config import settings
from copyfixer.models import SubmissionPublic

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[SubmissionPublic])
def read_session_submissions(request: Request, session: SessionDep) -> Any:
    """
    Submission history for the caller's anonymous session, newest first.
    """
    user_session = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not user_session:
        return []
    try:
        user_session = str(uuid.UUID(user_session))
    except ValueError:
        logger.info("Malformed session cookie on history request")
        return []
    return crud.list_session_submissions(
        session=session,
        user_session=user_session,
        limit=settings.SUBMISSION_HISTORY_LIMIT,
    )
