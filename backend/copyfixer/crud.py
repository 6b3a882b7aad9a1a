import uuid

from sqlmodel import Session, col, select

from copyfixer.models import (
    ProductType,
    ProductTypeIn,
    Submission,
    SubmissionCreate,
)


def list_product_types(*, session: Session) -> list[ProductType]:
    statement = select(ProductType).order_by(col(ProductType.created_at).asc())
    return list(session.exec(statement).all())


def get_product_type(*, session: Session, product_type_id: uuid.UUID) -> ProductType | None:
    return session.get(ProductType, product_type_id)


def get_product_type_by_name(
    *, session: Session, name: str, exclude_id: uuid.UUID | None = None
) -> ProductType | None:
    statement = select(ProductType).where(ProductType.name == name)
    if exclude_id is not None:
        statement = statement.where(ProductType.id != exclude_id)
    return session.exec(statement).first()


def create_product_type(*, session: Session, product_type_in: ProductTypeIn) -> ProductType:
    db_obj = ProductType(
        name=product_type_in.name,
        instructions=product_type_in.instructions,
        reference_files=[f.to_record() for f in product_type_in.reference_files or []],
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def update_product_type(
    *, session: Session, db_product_type: ProductType, product_type_in: ProductTypeIn
) -> ProductType:
    db_product_type.name = product_type_in.name
    db_product_type.instructions = product_type_in.instructions
    # Assign a new list so the JSON column is flagged dirty.
    db_product_type.reference_files = [
        f.to_record() for f in product_type_in.reference_files or []
    ]
    session.add(db_product_type)
    session.commit()
    session.refresh(db_product_type)
    return db_product_type


def delete_product_type(*, session: Session, db_product_type: ProductType) -> None:
    session.delete(db_product_type)
    session.commit()


def product_type_has_submissions(*, session: Session, product_type_id: uuid.UUID) -> bool:
    statement = select(Submission.id).where(Submission.product_type_id == product_type_id).limit(1)
    return session.exec(statement).first() is not None


def reference_file_urls_of(
    *, product_type: ProductType, exclude_ids: set[str] | None = None
) -> list[str]:
    """Stored URLs of a product type's reference files; records without a URL are skipped."""
    exclude_ids = exclude_ids or set()
    return [
        record["url"]
        for record in product_type.reference_files or []
        if record.get("url") and record.get("id") not in exclude_ids
    ]


def detach_reference_file(*, session: Session, file_id: str) -> list[ProductType]:
    """Remove a reference file from every product type listing it; returns the changed rows."""
    changed: list[ProductType] = []
    for product_type in list_product_types(session=session):
        records = product_type.reference_files or []
        kept = [record for record in records if record.get("id") != file_id]
        if len(kept) != len(records):
            product_type.reference_files = kept
            session.add(product_type)
            changed.append(product_type)
    if changed:
        session.commit()
        for product_type in changed:
            session.refresh(product_type)
    return changed


def create_submission(*, session: Session, submission_in: SubmissionCreate) -> Submission:
    db_submission = Submission.model_validate(submission_in)
    session.add(db_submission)
    session.commit()
    session.refresh(db_submission)
    return db_submission


def list_session_submissions(*, session: Session, user_session: str, limit: int) -> list[Submission]:
    statement = (
        select(Submission)
        .where(Submission.user_session == user_session)
        .order_by(col(Submission.created_at).desc())
        .limit(limit)
    )
    return list(session.exec(statement).all())
