"""Service layer for submissions."""
import logging
import uuid

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession, selectinload

from prepdesk.models.db.submission import Submission, SubmissionResponse
from prepdesk.models.db.test import Question, Test
from prepdesk.models.submissions import SubmissionPayload
from prepdesk.utils import isoformat_utc

logger = logging.getLogger(__name__)


def create_submission(db: DBSession, payload: SubmissionPayload) -> Submission:
    """
    Validate and store a submission, returning the stored record.
    Every response must refer to a question of the test, at most once.
    """
    if db.get(Test, payload.testId) is None:
        raise HTTPException(status_code=404, detail="Test not found")

    question_ids = set(
        db.execute(
            select(Question.id).where(Question.test_id == payload.testId)
        ).scalars()
    )

    submission = Submission(
        id=uuid.uuid4().hex,
        test_id=payload.testId,
        user_id=payload.userId,
        duration_minutes=payload.duration,
    )
    seen: set[str] = set()
    for item in payload.responses:
        if item.questionId not in question_ids:
            raise HTTPException(
                status_code=400, detail=f"Question not in test: {item.questionId}"
            )
        if item.questionId in seen:
            raise HTTPException(
                status_code=400, detail=f"Duplicate response: {item.questionId}"
            )
        seen.add(item.questionId)
        submission.responses.append(
            SubmissionResponse(
                question_id=item.questionId,
                selected_answer=item.selectedAnswer,
            )
        )

    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info(
        "Stored submission %s for test %s (%d responses)",
        submission.id,
        submission.test_id,
        len(submission.responses),
    )
    return submission


def get_submission(db: DBSession, result_id: str) -> Submission | None:
    """Get submission by result ID with responses loaded."""
    return db.execute(
        select(Submission)
        .options(selectinload(Submission.responses))
        .where(Submission.id == result_id)
    ).scalar_one_or_none()


def get_submissions_by_user(
    db: DBSession,
    user_id: str,
    test_id: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Submission]:
    """
    Get submissions for a user, optionally filtered by test_id.
    """
    query = select(Submission).where(Submission.user_id == user_id)

    if test_id:
        query = query.where(Submission.test_id == test_id)

    query = query.order_by(Submission.submitted_at.desc()).limit(limit).offset(offset)

    return list(db.execute(query).scalars().all())


def response_map(submission: Submission) -> dict[str, str]:
    """Selected answers keyed by question id."""
    return {item.question_id: item.selected_answer for item in submission.responses}


def serialize_submission(submission: Submission) -> dict[str, object]:
    return {
        "resultId": submission.id,
        "testId": submission.test_id,
        "userId": submission.user_id,
        "duration": submission.duration_minutes,
        "submittedAt": isoformat_utc(submission.submitted_at),
        "answered": submission.answered_count,
        "responses": [
            {"questionId": item.question_id, "selectedAnswer": item.selected_answer}
            for item in submission.responses
        ],
    }
