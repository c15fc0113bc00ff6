'''
Pydantic models for the subject catalog.
'''
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubjectWrite(BaseModel):
    """Validates the request body for creating or renaming a subject."""
    name: str = Field(..., min_length=1, max_length=100)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Subject name cannot be blank.")
        return value


class SubjectRecord(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)
