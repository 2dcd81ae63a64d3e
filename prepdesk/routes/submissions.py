"""Submission endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session as DbSession

from prepdesk.database import get_db
from prepdesk.models import SubmissionCreated, SubmissionOut, SubmissionPayload
from prepdesk.services import submission_service
from prepdesk.utils import validate_id

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


@router.post("", response_model=SubmissionCreated, status_code=201)
def create_submission(
    payload: SubmissionPayload,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Store a submitted test and return its result id."""
    validate_id("testId", payload.testId)
    submission = submission_service.create_submission(db, payload)
    return {"resultId": submission.id}


@router.get("", response_model=list[SubmissionOut])
def list_submissions(
    db: Annotated[DbSession, Depends(get_db)],
    user_id: Annotated[str, Query(alias="userId", min_length=1)],
    test_id: Annotated[str | None, Query(alias="testId")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[dict[str, object]]:
    """List a user's submissions, newest first."""
    submissions = submission_service.get_submissions_by_user(
        db, user_id, test_id=test_id, limit=limit, offset=offset
    )
    return [submission_service.serialize_submission(item) for item in submissions]


@router.get("/{result_id}", response_model=SubmissionOut)
def get_submission(
    result_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Get a stored submission with its answers."""
    result_id = validate_id("resultId", result_id)
    submission = submission_service.get_submission(db, result_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Result not found")
    return submission_service.serialize_submission(submission)
