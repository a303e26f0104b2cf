"""Workout program templates and their per-user customizations."""

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Difficulty = Literal["beginner", "intermediate", "advanced"]

_URL_RE = re.compile(r"^https?://\S+$")


class ProgramMetadata(BaseModel):
    difficulty: Difficulty | None = None
    duration: str | None = None
    equipment: list[str] | None = None
    tags: list[str] | None = None


class ProgramDefinition(BaseModel):
    """Program content as authored by an admin (form or YAML upload)."""

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    template: str = Field(min_length=1, description="Markdown workout plan")
    image_url: str | None = None
    metadata: ProgramMetadata | None = None

    @field_validator("image_url")
    @classmethod
    def _check_url(cls, value: str | None) -> str | None:
        if value is not None and not _URL_RE.match(value):
            raise ValueError("Invalid url")
        return value


class Program(ProgramDefinition):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserProgram(BaseModel):
    """A program customized by the LLM for one user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    program_id: str
    customized_plan: str
    pdf_path: str | None = None
    created_at: datetime | None = None


class ProgramValidationError(BaseModel):
    field: str
    message: str
    line: int | None = None
