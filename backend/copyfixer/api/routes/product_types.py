import logging
import uuid
from typing import Any

from fastapi import APIRouter
from sqlalchemy.exc import IntegrityError

from copyfixer import crud
from copyfixer.api.deps import AdminDep, CleanupStorageDep, SessionDep
from copyfixer.errors import ConflictError, NotFoundError, ValidationError
from copyfixer.models import ProductType, ProductTypeDeleted, ProductTypeIn, ProductTypePublic

router = APIRouter()
logger = logging.getLogger(__name__)

DUPLICATE_NAME_MESSAGE = "A product type with this name already exists"


def _require_fields(product_type_in: ProductTypeIn) -> None:
    if not product_type_in.name or not product_type_in.instructions:
        raise ValidationError("Name and instructions are required")


def _get_or_404(session: SessionDep, id: uuid.UUID) -> ProductType:
    product_type = crud.get_product_type(session=session, product_type_id=id)
    if not product_type:
        raise NotFoundError("Product type not found")
    return product_type


@router.get("", response_model=list[ProductTypePublic])
def read_product_types(session: SessionDep) -> Any:
    return crud.list_product_types(session=session)


@router.post("", response_model=ProductTypePublic)
def create_new_product_type(
    *, session: SessionDep, _admin: AdminDep, product_type_in: ProductTypeIn
) -> Any:
    _require_fields(product_type_in)
    if crud.get_product_type_by_name(session=session, name=product_type_in.name):
        raise ConflictError(DUPLICATE_NAME_MESSAGE)
    try:
        product_type = crud.create_product_type(session=session, product_type_in=product_type_in)
    except IntegrityError as exc:
        # Lost a race with a concurrent insert of the same name.
        session.rollback()
        raise ConflictError(DUPLICATE_NAME_MESSAGE) from exc
    logger.info("Created product type %s (%s)", product_type.name, product_type.id)
    return product_type


@router.put("/{id}", response_model=ProductTypePublic)
def update_existing_product_type(
    *,
    id: uuid.UUID,
    session: SessionDep,
    _admin: AdminDep,
    storage: CleanupStorageDep,
    product_type_in: ProductTypeIn,
) -> Any:
    _require_fields(product_type_in)
    product_type = _get_or_404(session, id)
    if crud.get_product_type_by_name(session=session, name=product_type_in.name, exclude_id=id):
        raise ConflictError(DUPLICATE_NAME_MESSAGE)

    if product_type_in.reference_files is None:
        # Omitted list means "no reference files", matching create.
        product_type_in.reference_files = []
    kept_ids = {f.id for f in product_type_in.reference_files}
    dropped_urls = crud.reference_file_urls_of(product_type=product_type, exclude_ids=kept_ids)

    try:
        product_type = crud.update_product_type(
            session=session, db_product_type=product_type, product_type_in=product_type_in
        )
    except IntegrityError as exc:
        session.rollback()
        raise ConflictError(DUPLICATE_NAME_MESSAGE) from exc

    if dropped_urls and storage is not None:
        storage.delete_urls(dropped_urls)
    logger.info(
        "Updated product type %s (%s reference files, %s removed)",
        product_type.id,
        len(product_type.reference_files),
        len(dropped_urls),
    )
    return product_type


@router.delete("/{id}", response_model=ProductTypeDeleted)
def delete_existing_product_type(
    *, id: uuid.UUID, session: SessionDep, _admin: AdminDep, storage: CleanupStorageDep
) -> Any:
    product_type = _get_or_404(session, id)
    if crud.product_type_has_submissions(session=session, product_type_id=id):
        logger.info("Refusing to delete product type %s: submissions reference it", id)
        raise ConflictError(
            "Cannot delete product type",
            hint=(
                "This product type has been used in copy generation requests and cannot be "
                "deleted. You can edit it instead."
            ),
        )

    name = product_type.name
    reference_urls = crud.reference_file_urls_of(product_type=product_type)
    try:
        crud.delete_product_type(session=session, db_product_type=product_type)
    except IntegrityError as exc:
        session.rollback()
        raise ConflictError(
            "Cannot delete product type",
            hint="This product type is being used by existing submissions and cannot be deleted.",
        ) from exc

    if reference_urls and storage is not None:
        storage.delete_urls(reference_urls)
    logger.info("Deleted product type %s (%s)", name, id)
    return ProductTypeDeleted(
        message="Product type deleted successfully", deleted_id=id, deleted_name=name
    )
