from typing import Any, Literal

from pydantic import Field, field_validator

from resume_builder.config import settings
from resume_builder.schemas.common import CamelModel
from resume_builder.utils.timestamps import parse_iso8601

DocumentType = Literal["resume", "cover-letter", "resignation-letter", "other-letter"]


class DocumentSaveRequest(CamelModel):
    type: DocumentType
    title: str = Field(min_length=1)
    data: Any = Field(default_factory=dict)
    # Sent by the client but never trusted: the owner comes from the bearer token.
    user_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        if len(value) > settings.max_title_chars:
            raise ValueError(f"title must be at most {settings.max_title_chars} characters")
        return value

    @field_validator("created_at", "updated_at")
    @classmethod
    def check_timestamp(cls, value: str | None) -> str | None:
        if value is None:
            return None
        parse_iso8601(value)
        return value


class DocumentSaveResponse(CamelModel):
    success: bool = True
    document_id: str


class DocumentIdRequest(CamelModel):
    document_id: str = Field(min_length=1)


class DocumentSummary(CamelModel):
    id: str
    type: str
    title: str
    created_at: str | None
    updated_at: str | None


class DocumentListResponse(CamelModel):
    documents: list[DocumentSummary]


class SuccessResponse(CamelModel):
    success: bool = True
