import logging
from datetime import timedelta
from typing import Any

from fastapi import APIRouter

from copyfixer.api.deps import AdminDep
from copyfixer.core import security
from copyfixer.core.config import settings
from copyfixer.errors import AdminAuthError
from copyfixer.models import AdminLogin, Message, Token

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login/admin", response_model=Token)
def login_admin(body: AdminLogin) -> Any:
    """
    Exchange the shared admin secret for a signed, expiring bearer token.
    """
    if not security.verify_admin_secret(body.secret):
        logger.warning("Rejected admin login attempt")
        raise AdminAuthError("Invalid admin secret")
    access_token = security.create_access_token(
        security.ADMIN_SUBJECT,
        expires_delta=timedelta(minutes=settings.ADMIN_TOKEN_EXPIRE_MINUTES),
    )
    return Token(access_token=access_token)


@router.get("/login/admin/verify", response_model=Message)
def verify_admin_token(_admin: AdminDep) -> Any:
    return Message(message="ok")
