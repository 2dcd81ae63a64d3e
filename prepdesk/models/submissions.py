"""Submission-related Pydantic models."""
from pydantic import BaseModel, Field


class ResponseItem(BaseModel):
    """Answer to one question."""

    questionId: str = Field(..., min_length=1)
    selectedAnswer: str = Field(..., min_length=1)


class SubmissionPayload(BaseModel):
    """Model for submitting a test."""

    testId: str = Field(..., min_length=1)
    userId: str = Field(..., min_length=1)
    duration: int = Field(..., ge=0)
    responses: list[ResponseItem] = Field(default_factory=list)


class SubmissionCreated(BaseModel):
    resultId: str


class SubmissionOut(BaseModel):
    """Stored submission, used to review past answers."""

    resultId: str
    testId: str
    userId: str
    duration: int
    submittedAt: str
    answered: int
    responses: list[ResponseItem]
