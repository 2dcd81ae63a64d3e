"""
Submission and SubmissionResponse database models.
"""

from __future__ import annotations

from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prepdesk.database import Base


class Submission(Base):
    """
    A submitted test.
    The id is the result identifier handed back to the student.
    """

    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    test_id: Mapped[str] = mapped_column(
        ForeignKey("tests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(default=0, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    responses: Mapped[list["SubmissionResponse"]] = relationship(
        "SubmissionResponse",
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="SubmissionResponse.id",
    )

    @property
    def answered_count(self) -> int:
        return len(self.responses)


class SubmissionResponse(Base):
    """
    One answered question within a submission.
    Unanswered questions have no row.
    """

    __tablename__ = "submission_responses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    submission_id: Mapped[str] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[str] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    selected_answer: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint("submission_id", "question_id", name="uq_submission_question"),
    )

    submission: Mapped["Submission"] = relationship(
        "Submission", back_populates="responses"
    )
