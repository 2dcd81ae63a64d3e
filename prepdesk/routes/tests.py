"""Test catalog and question-set endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session as DbSession

from prepdesk.database import get_db
from prepdesk.models import TestOut, TestSummary
from prepdesk.services import test_service
from prepdesk.utils import validate_id

router = APIRouter(prefix="/api/tests", tags=["tests"])


@router.get("", response_model=list[TestSummary])
def list_tests(db: Annotated[DbSession, Depends(get_db)]) -> list[dict[str, object]]:
    """List available tests."""
    return test_service.list_tests(db)


@router.get("/{test_id}", response_model=TestOut)
def get_test(
    test_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Get a test with its questions in ordinal order."""
    test_id = validate_id("testId", test_id)
    test = test_service.get_test(db, test_id)
    if test is None:
        raise HTTPException(status_code=404, detail="Test not found")
    return test_service.serialize_test(test)
