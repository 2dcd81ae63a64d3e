"""Value types shared by the session modules."""
from __future__ import annotations

import enum
from dataclasses import dataclass


class Subject(str, enum.Enum):
    """Subject a question belongs to."""

    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    MATHEMATICS = "Mathematics"
    BIOLOGY = "Biology"


class QuestionStatus(str, enum.Enum):
    """Per-question progress status."""

    CURRENT = "current"
    UNATTEMPTED = "unattempted"
    ATTEMPTED = "attempted"
    REVIEW = "review"


class SessionMode(str, enum.Enum):
    """Live timed test, or read-only review of a past submission."""

    TEST = "test"
    REVIEW = "review"


class Theme(str, enum.Enum):
    LIGHT = "light"
    DARK = "dark"


class ReviewOutcome(str, enum.Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class Question:
    """A question as served by the backend. Read-only after load."""

    id: str
    subject: Subject
    order: int
    text: str
    options: tuple[str, ...]
    correct_answer: str
    image: str | None = None
    solution: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, object]) -> Question:
        """Build from the camelCase wire shape of the fetch endpoint."""
        return cls(
            id=str(data["id"]),
            subject=Subject(data["subject"]),
            order=int(data["order"]),
            text=str(data.get("question", "")),
            options=tuple(str(option) for option in data.get("options", [])),
            correct_answer=str(data.get("correctAnswer", "")),
            image=data.get("image"),
            solution=data.get("solution"),
        )


@dataclass(frozen=True)
class TestWithQuestions:
    """A test and its ordered question set."""

    __test__ = False  # not a pytest test class

    id: str
    title: str
    duration: int
    questions: tuple[Question, ...]

    @classmethod
    def from_payload(cls, data: dict[str, object]) -> TestWithQuestions:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            duration=int(data.get("duration", 0)),
            questions=tuple(
                Question.from_payload(item) for item in data.get("questions", [])
            ),
        )


@dataclass
class SessionContext:
    """
    Per-session configuration injected by the host.
    Replaces ambient globals such as the signed-in user and the theme.
    """

    user_id: str
    mode: SessionMode = SessionMode.TEST
    theme: Theme = Theme.LIGHT
    result_id: str | None = None

    @property
    def read_only(self) -> bool:
        return self.mode is SessionMode.REVIEW

    def toggle_theme(self) -> Theme:
        self.theme = Theme.DARK if self.theme is Theme.LIGHT else Theme.LIGHT
        return self.theme
