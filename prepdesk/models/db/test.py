"""
Test and Question database models.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prepdesk.database import Base


class Test(Base):
    """
    A test paper.
    Questions are kept in ordinal order through the relationship.
    """

    __tablename__ = "tests"
    __test__ = False  # not a pytest test class

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    duration: Mapped[int] = mapped_column(default=0, nullable=False)  # minutes
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="test",
        cascade="all, delete-orphan",
        order_by=lambda: [Question.order, Question.position],
    )


class Question(Base):
    """
    A single multiple-choice question within a test.
    """

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    test_id: Mapped[str] = mapped_column(
        ForeignKey("tests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject: Mapped[str] = mapped_column(String(20), nullable=False)

    # Ordinal shown to the student, and insertion position as a tie-breaker
    order: Mapped[int] = mapped_column(nullable=False)
    position: Mapped[int] = mapped_column(default=0, nullable=False)

    text: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    options_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    correct_answer: Mapped[str] = mapped_column(Text, nullable=False)
    solution: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("test_id", "position", name="uq_test_question_position"),
    )

    test: Mapped["Test"] = relationship("Test", back_populates="questions")

    @property
    def options(self) -> list[str]:
        """Parse options from JSON."""
        try:
            value = json.loads(self.options_json)
        except (json.JSONDecodeError, TypeError):
            return []
        return value if isinstance(value, list) else []

    @options.setter
    def options(self, value: list[str] | None) -> None:
        """Serialize options to JSON."""
        self.options_json = json.dumps(value or [], ensure_ascii=False)
