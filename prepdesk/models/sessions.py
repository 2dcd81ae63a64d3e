"""Pydantic models for hosted test-taking sessions."""
from pydantic import BaseModel, Field

from prepdesk.session.types import (
    QuestionStatus,
    ReviewOutcome,
    SessionMode,
    Subject,
    Theme,
)


class SessionStartRequest(BaseModel):
    """Open a session on a test."""

    testId: str = Field(..., min_length=1)
    userId: str | None = None
    mode: SessionMode = SessionMode.TEST
    resultId: str | None = None
    theme: Theme = Theme.LIGHT


class SelectOptionRequest(BaseModel):
    questionId: str = Field(..., min_length=1)
    option: str = Field(..., min_length=1)


class ToggleReviewRequest(BaseModel):
    questionId: str = Field(..., min_length=1)


class NavigateRequest(BaseModel):
    index: int


class QuestionState(BaseModel):
    """Reviewer-panel entry for one question."""

    id: str
    subject: Subject
    order: int
    status: QuestionStatus
    selectedOption: str | None = None
    markedForReview: bool
    outcome: ReviewOutcome | None = None


class CurrentQuestion(BaseModel):
    """The displayed question. Answer key only appears in review mode."""

    index: int
    id: str
    subject: Subject
    order: int
    question: str
    image: str | None = None
    options: list[str]
    selectedOption: str | None = None
    status: QuestionStatus
    markedForReview: bool
    correctAnswer: str | None = None
    solution: str | None = None


class SubjectGroupView(BaseModel):
    subject: Subject
    firstOrder: int
    lastOrder: int
    questionIds: list[str]


class SessionCounts(BaseModel):
    attempted: int
    review: int
    unattempted: int


class SessionView(BaseModel):
    """Everything the test-taking screen renders."""

    sessionId: str
    testId: str
    title: str
    duration: int
    mode: SessionMode
    theme: Theme
    elapsed: str
    currentIndex: int
    currentQuestion: CurrentQuestion | None = None
    questions: list[QuestionState]
    subjects: list[SubjectGroupView]
    counts: SessionCounts
    resultId: str | None = None


class SessionSubmitted(BaseModel):
    sessionId: str
    resultId: str
    answered: int
    duration: int
