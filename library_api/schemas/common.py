"""Shared schema pieces: the response envelope, record ids and email addresses."""

from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

# Role values shared by users (access control) and members (metadata).
RoleName = Literal["Admin", "Member"]

# Largest value an INTEGER primary key column holds.
MAX_ID = 2**31 - 1

RecordId = Annotated[int, Field(ge=1, le=MAX_ID)]

EMAIL_MAX_LEN = 255


def normalize_email(value: str) -> str:
    """Lower-case an address EmailStr has already accepted."""
    if len(value) > EMAIL_MAX_LEN:
        raise ValueError(f"Email must be at most {EMAIL_MAX_LEN} characters")
    return value.lower()


EmailAddress = Annotated[EmailStr, AfterValidator(normalize_email)]


class CamelModel(BaseModel):
    """Base for API models: camelCase on the wire, snake_case attributes, ORM-friendly."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class MessageResponse(BaseModel):
    """Envelope for operations that return only a message (e.g. deletes)."""

    success: bool = True
    message: str
