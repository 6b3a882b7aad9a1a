import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlalchemy import JSON, DateTime
from sqlmodel import Field, SQLModel


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


# Reference file metadata, embedded as JSON in ProductType.reference_files
class ReferenceFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    size: int
    type: str
    url: str
    uploaded_at: datetime = PydanticField(alias="uploadedAt")

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# Shared properties
class ProductTypeBase(SQLModel):
    name: str = Field(unique=True, index=True, min_length=1, max_length=255)
    instructions: str = Field(min_length=1)


# Properties to receive via API on create and update
class ProductTypeIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    instructions: str = ""
    reference_files: list[ReferenceFile] | None = PydanticField(default=None, alias="referenceFiles")


# Database model, database table inferred from class name
class ProductType(ProductTypeBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    reference_files: list[dict] = Field(default_factory=list, sa_type=JSON)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


# Properties to return via API
class ProductTypePublic(ProductTypeBase):
    id: uuid.UUID
    reference_files: list[ReferenceFile] = []
    created_at: datetime | None = None


class ProductTypeDeleted(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    deleted_id: uuid.UUID = PydanticField(serialization_alias="deletedId")
    deleted_name: str = PydanticField(serialization_alias="deletedName")


class SubmissionBase(SQLModel):
    input_copy: str = Field(default="")
    suggestions: list[str] = Field(default_factory=list, sa_type=JSON)
    has_screenshot: bool = False


class SubmissionCreate(SubmissionBase):
    product_type_id: uuid.UUID
    user_session: str


class Submission(SubmissionBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    product_type_id: uuid.UUID = Field(foreign_key="producttype.id", nullable=False, index=True)
    user_session: str = Field(index=True, max_length=64)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class SubmissionPublic(SubmissionBase):
    id: uuid.UUID
    product_type_id: uuid.UUID
    created_at: datetime | None = None


class SuggestionsPublic(BaseModel):
    suggestions: list[str]


# Generic message
class Message(SQLModel):
    message: str


# Admin login
class AdminLogin(BaseModel):
    secret: str = ""


# JSON payload containing access token
class Token(SQLModel):
    access_token: str
    token_type: str = "bearer"
