from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class ExtractedText(BaseModel):
    text: str
    file_type: str
    page_count: int | None = None
    word_count: int = Field(ge=0)
    character_count: int = Field(ge=0)
    extracted_at: datetime
    parsing_warnings: list[str] = Field(default_factory=list)

    @field_validator("file_type")
    @classmethod
    def _validate_file_type(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"pdf", "docx", "txt"}:
            raise ValueError("file_type must be one of: pdf, docx, txt")
        return normalized
