from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


class DiagramSave(BaseModel):
    """Insert when id is absent, update otherwise"""
    id: UUID | None = None
    title: str = Field(default="", max_length=200)
    description: str | None = None
    content: str
    thumbnail_url: str | None = Field(None, max_length=500)
    is_public: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()


class DiagramResponse(BaseModel):
    id: UUID
    title: str
    description: str | None
    content: str
    thumbnail_url: str | None
    is_public: bool
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
