"""Test-related Pydantic models."""
from pydantic import BaseModel, Field, field_validator, model_validator

from prepdesk.session.types import Subject
from prepdesk.utils.validation import ID_REGEX, is_valid_id


def _check_id(value: str | None) -> str | None:
    if value is not None and not is_valid_id(value):
        raise ValueError("id must be a URL-safe identifier")
    return value


class QuestionImport(BaseModel):
    """A question in an imported test document."""

    id: str | None = Field(None, pattern=ID_REGEX)
    subject: Subject
    order: int = Field(..., ge=1)
    question: str = Field(..., min_length=1)
    image: str | None = None
    options: list[str] = Field(..., min_length=2)
    correctAnswer: str = Field(..., min_length=1)
    solution: str | None = None

    @field_validator("id")
    @classmethod
    def check_id(cls, value: str | None) -> str | None:
        return _check_id(value)

    @model_validator(mode="after")
    def check_correct_answer(self) -> "QuestionImport":
        if self.correctAnswer not in self.options:
            raise ValueError("correctAnswer must be one of the options")
        if len(set(self.options)) != len(self.options):
            raise ValueError("options must be unique")
        return self


class TestImport(BaseModel):
    """A test document accepted by the import command."""

    __test__ = False  # not a pytest test class

    id: str | None = Field(None, pattern=ID_REGEX)
    title: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1)
    questions: list[QuestionImport] = Field(..., min_length=1)

    @field_validator("id")
    @classmethod
    def check_id(cls, value: str | None) -> str | None:
        return _check_id(value)


class QuestionOut(BaseModel):
    """Question as served by the fetch endpoint."""

    id: str
    subject: Subject
    order: int
    question: str
    image: str | None = None
    options: list[str]
    correctAnswer: str
    solution: str | None = None


class TestOut(BaseModel):
    """Test with its ordered question set."""

    __test__ = False  # not a pytest test class

    id: str
    title: str
    duration: int
    questions: list[QuestionOut]


class TestSummary(BaseModel):
    """Catalog entry."""

    __test__ = False  # not a pytest test class

    id: str
    title: str
    duration: int
    questionCount: int
