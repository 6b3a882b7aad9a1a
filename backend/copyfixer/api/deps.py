import logging
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from copyfixer.agent.suggestion_agent import SuggestionAgent
from copyfixer.core.db import get_session
from copyfixer.core.security import decode_admin_token
from copyfixer.errors import AdminAuthError, ConfigurationError
from copyfixer.storage import ReferenceFileStorage, get_reference_storage

logger = logging.getLogger(__name__)

admin_bearer = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    yield from get_session()


SessionDep = Annotated[Session, Depends(get_db)]


def get_current_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(admin_bearer)],
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AdminAuthError()
    return decode_admin_token(credentials.credentials)


AdminDep = Annotated[str, Depends(get_current_admin)]


def get_storage() -> ReferenceFileStorage:
    return get_reference_storage()


StorageDep = Annotated[ReferenceFileStorage, Depends(get_storage)]


def get_cleanup_storage() -> ReferenceFileStorage | None:
    """Storage for best-effort object cleanup; None when storage is not configured."""
    try:
        return get_reference_storage()
    except ConfigurationError as exc:
        logger.warning("Reference storage unavailable, skipping object cleanup: %s", exc)
        return None


CleanupStorageDep = Annotated[ReferenceFileStorage | None, Depends(get_cleanup_storage)]


def get_suggestion_agent() -> SuggestionAgent:
    return SuggestionAgent()


SuggestionAgentDep = Annotated[SuggestionAgent, Depends(get_suggestion_agent)]
