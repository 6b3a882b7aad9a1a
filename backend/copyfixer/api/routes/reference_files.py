import io
import logging
import uuid
from pathlib import PurePath
from typing import Annotated, Any

import pypdf
from fastapi import APIRouter, File, Query, UploadFile
from pypdf.errors import PdfReadError
from starlette.concurrency import run_in_threadpool

from copyfixer import crud
from copyfixer.api.deps import AdminDep, SessionDep, StorageDep
from copyfixer.errors import ValidationError
from copyfixer.models import Message, ReferenceFile, get_datetime_utc

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024
ALLOWED_EXTENSIONS = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}


def validate_reference_upload(filename: str, content: bytes) -> str:
    """Checks extension, size and PDF integrity; returns the extension."""
    extension = PurePath(filename).suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationError("Invalid file type. Only PDF, PNG, JPG, and WebP files are allowed.")
    if len(content) > MAX_FILE_SIZE:
        raise ValidationError("File size exceeds 5MB limit.")
    if extension == ".pdf":
        try:
            reader = pypdf.PdfReader(io.BytesIO(content))
            page_count = len(reader.pages)
        except (PdfReadError, ValueError) as e:
            raise ValidationError(f"Failed to parse PDF: {str(e)}") from e
        if page_count == 0:
            raise ValidationError("PDF has no pages.")
    return extension


@router.post("", response_model=ReferenceFile)
async def upload_reference_file(
    *,
    _admin: AdminDep,
    storage: StorageDep,
    file: UploadFile = File(...),
) -> Any:
    """
    Upload a reference document to object storage and return its metadata.
    The caller attaches the result to a product type via the product type API.
    """
    filename = file.filename or ""
    if not filename:
        raise ValidationError("No file provided")
    if file.size is not None and file.size > MAX_FILE_SIZE:
        raise ValidationError("File size exceeds 5MB limit.")

    content = await file.read()
    extension = validate_reference_upload(filename, content)
    content_type = file.content_type or ALLOWED_EXTENSIONS[extension]

    file_id = str(uuid.uuid4())
    key = storage.build_key(file_id=file_id, filename=filename)
    logger.info("Uploading reference file %s (%s bytes) to %s", filename, len(content), key)
    url = await run_in_threadpool(storage.upload_bytes, key=key, data=content, content_type=content_type)

    return ReferenceFile(
        id=file_id,
        name=filename,
        size=len(content),
        type=content_type,
        url=url,
        uploaded_at=get_datetime_utc(),
    )


@router.delete("", response_model=Message)
async def delete_reference_file(
    *,
    session: SessionDep,
    _admin: AdminDep,
    storage: StorageDep,
    id: Annotated[str | None, Query()] = None,
    url: Annotated[str | None, Query()] = None,
) -> Any:
    """
    Delete a stored reference file and detach it from any product type listing it.
    """
    if not id or not url:
        raise ValidationError("File ID and URL are required")

    key = storage.key_from_url(url)
    logger.info("Deleting reference file %s at %s", id, key)
    await run_in_threadpool(storage.delete_object, key=key)

    detached = crud.detach_reference_file(session=session, file_id=id)
    if detached:
        logger.info("Detached reference file %s from %s product type(s)", id, len(detached))
    return Message(message="File deleted successfully")
