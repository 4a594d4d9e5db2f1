"""
Users Model - Pydantic models for user data.
"""
import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel


NAME_MAX_LENGTH = 100

# local@domain.tld, where tld is 2-3 word characters
EMAIL_PATTERN = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$")


def utc_now() -> datetime:
    """Get current UTC datetime, truncated to the millisecond MongoDB stores."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def normalize_email(value: Optional[str]) -> Optional[str]:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def validation_messages(exc: ValidationError) -> list[str]:
    """Flatten a ValidationError into the plain messages raised by validators."""
    messages = []
    for error in exc.errors():
        ctx_error = (error.get("ctx") or {}).get("error")
        messages.append(str(ctx_error) if ctx_error is not None else error["msg"])
    return messages


class UserFields(BaseModel):
    """Schema constraints shared by every stored user."""
    name: str
    email: str

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        if isinstance(v, str):
            v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if isinstance(v, str) and len(v) > NAME_MAX_LENGTH:
            raise ValueError(f"Name cannot be more than {NAME_MAX_LENGTH} characters")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v):
        v = normalize_email(v)
        if not v:
            raise ValueError("Email is required")
        if isinstance(v, str) and not EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email")
        return v


class UsersModel(UserFields):
    """
    User model for MongoDB persistence.

    - id: ObjectId of the document, as a hex string
    - name: Trimmed display name
    - email: Trimmed, lowercased, unique address
    - created_at / updated_at: Serialized as createdAt / updatedAt
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="MongoDB ObjectId as hex string")
    created_at: datetime
    updated_at: datetime

    def to_document(self) -> dict:
        """Convert to MongoDB document format (without _id)."""
        return {
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "UsersModel":
        """Create model from MongoDB document."""
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            email=doc["email"],
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )


class UserPayload(BaseModel):
    """Request body for create and update; both fields may be omitted."""
    name: Optional[str] = None
    email: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class UserListResponse(BaseModel):
    users: list[UsersModel]
    pagination: Pagination


class MessageResponse(BaseModel):
    message: str
