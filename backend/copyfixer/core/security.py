import hmac
from datetime import datetime, timedelta, timezone

import jwt
from jwt.exceptions import InvalidTokenError

from copyfixer.core.config import settings
from copyfixer.errors import AdminAuthError, ConfigurationError

ALGORITHM = "HS256"
ADMIN_SUBJECT = "admin"


def verify_admin_secret(candidate: str) -> bool:
    if not settings.ADMIN_SECRET:
        raise ConfigurationError("Admin secret is not configured")
    return hmac.compare_digest(candidate.encode("utf-8"), settings.ADMIN_SECRET.encode("utf-8"))


def create_access_token(subject: str, expires_delta: timedelta) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_admin_token(token: str) -> str:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except InvalidTokenError as exc:
        raise AdminAuthError("Invalid or expired admin token") from exc
    subject = payload.get("sub")
    if subject != ADMIN_SUBJECT:
        raise AdminAuthError("Invalid or expired admin token")
    return subject
