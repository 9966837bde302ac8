from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from schoolresults.core.models import CLASSES, Exam, Group, Section
from schoolresults.errors import ValidationError


class StudentPayload(BaseModel):
    name: str
    roll: int = Field(ge=1)
    class_number: int
    section: Section

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value

    @field_validator("class_number")
    @classmethod
    def _served_class(cls, value: int) -> int:
        if value not in CLASSES:
            raise ValueError(f"class must be one of {', '.join(str(c) for c in CLASSES)}")
        return value


class MarkRowPayload(BaseModel):
    student_id: int
    theory: int = 0
    mcq: int = 0
    practical: int = 0

    @field_validator("theory", "mcq", "practical", mode="before")
    @classmethod
    def _blank_is_zero(cls, value):
        if value is None:
            return 0
        if isinstance(value, str):
            value = value.strip()
            return value or 0
        return value


class MarkEntryPayload(BaseModel):
    exam: Exam
    class_number: int
    section: Section
    group: Optional[Group] = None
    subject: str = Field(min_length=1)
    rows: List[MarkRowPayload] = Field(default_factory=list)

    @field_validator("group", mode="before")
    @classmethod
    def _blank_group(cls, value):
        return value or None


def parse(model: type[BaseModel], **data) -> BaseModel:
    """Validate boundary input, turning pydantic errors into a domain ValidationError."""
    try:
        return model(**data)
    except PydanticValidationError as exc:
        problems = []
        for err in exc.errors():
            where = ".".join(str(part) for part in err["loc"])
            message = err["msg"].removeprefix("Value error, ")
            problems.append(f"{where}: {message}" if where else message)
        raise ValidationError(problems) from exc
