import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from copyfixer.api.deps import SessionDep
from copyfixer.errors import StorageError

router = APIRouter(prefix="/utils", tags=["utils"])
logger = logging.getLogger(__name__)


@router.get("/health-check/")
async def health_check() -> bool:
    return True


@router.get("/health-check/db")
def health_check_db(session: SessionDep) -> dict[str, str]:
    try:
        session.exec(text("SELECT 1"))  # type: ignore[call-overload]
    except SQLAlchemyError as exc:
        logger.error("Database health check failed: %s", exc)
        raise StorageError("Database unavailable") from exc
    return {"db": "ok"}
