"""Hosted test-taking session endpoints."""
from contextlib import contextmanager
from typing import Annotated, Iterator

from fastapi import APIRouter, Depends, HTTPException

from prepdesk.config import DEFAULT_USER_ID
from prepdesk.dependencies import get_gateway
from prepdesk.models import (
    NavigateRequest,
    SelectOptionRequest,
    SessionStartRequest,
    SessionSubmitted,
    SessionView,
    ToggleReviewRequest,
)
from prepdesk.services.session_service import (
    SessionRegistry,
    get_registry,
    serialize_session,
)
from prepdesk.session import (
    InvalidOption,
    NavigationError,
    ReadOnlySession,
    ResultNotFound,
    SessionContext,
    SessionMode,
    SubmissionFailed,
    TestGateway,
    TestNotFound,
    TestSession,
    TestSessionError,
    TransportError,
    UnknownQuestion,
)
from prepdesk.utils import validate_id

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

Registry = Annotated[SessionRegistry, Depends(get_registry)]
Gateway = Annotated[TestGateway, Depends(get_gateway)]

_STATUS_BY_ERROR: list[tuple[type[TestSessionError], int]] = [
    (TestNotFound, 404),
    (ResultNotFound, 404),
    (UnknownQuestion, 404),
    (InvalidOption, 400),
    (NavigationError, 400),
    (ReadOnlySession, 409),
    (TransportError, 502),
    (SubmissionFailed, 502),
]


@contextmanager
def session_errors() -> Iterator[None]:
    """Report session errors as HTTP errors."""
    try:
        yield
    except TestSessionError as exc:
        for error_type, status_code in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                raise HTTPException(status_code=status_code, detail=str(exc)) from exc
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _load(registry: SessionRegistry, session_id: str) -> TestSession:
    return registry.get(validate_id("sessionId", session_id))


@router.post("", response_model=SessionView, status_code=201)
async def start_session(
    payload: SessionStartRequest,
    registry: Registry,
    gateway: Gateway,
) -> dict[str, object]:
    """Load a test and open a session on it. Test-mode sessions start timing."""
    test_id = validate_id("testId", payload.testId)
    if payload.mode is SessionMode.REVIEW:
        if not payload.resultId:
            raise HTTPException(status_code=400, detail="resultId is required in review mode")
        validate_id("resultId", payload.resultId)

    context = SessionContext(
        user_id=payload.userId or DEFAULT_USER_ID,
        mode=payload.mode,
        theme=payload.theme,
        result_id=payload.resultId,
    )
    with session_errors():
        session = await TestSession.open(gateway, test_id, context)
    session.start()
    session_id = registry.add(session)
    return serialize_session(session_id, session)


@router.get("/{session_id}", response_model=SessionView)
async def get_session(session_id: str, registry: Registry) -> dict[str, object]:
    """Current state of a session."""
    session = _load(registry, session_id)
    return serialize_session(session_id, session)


@router.post("/{session_id}/select", response_model=SessionView)
async def select_option(
    session_id: str,
    payload: SelectOptionRequest,
    registry: Registry,
) -> dict[str, object]:
    """Choose an answer for a question."""
    session = _load(registry, session_id)
    with session_errors():
        session.select_option(payload.questionId, payload.option)
    return serialize_session(session_id, session)


@router.post("/{session_id}/review", response_model=SessionView)
async def toggle_review(
    session_id: str,
    payload: ToggleReviewRequest,
    registry: Registry,
) -> dict[str, object]:
    """Mark a question for review, or remove the mark."""
    session = _load(registry, session_id)
    with session_errors():
        session.toggle_review(payload.questionId)
    return serialize_session(session_id, session)


@router.post("/{session_id}/navigate", response_model=SessionView)
async def navigate(
    session_id: str,
    payload: NavigateRequest,
    registry: Registry,
) -> dict[str, object]:
    """Jump to a question by index."""
    session = _load(registry, session_id)
    with session_errors():
        session.go_to_question(payload.index)
    return serialize_session(session_id, session)


@router.post("/{session_id}/next", response_model=SessionView)
async def next_question(session_id: str, registry: Registry) -> dict[str, object]:
    session = _load(registry, session_id)
    session.go_to_next()
    return serialize_session(session_id, session)


@router.post("/{session_id}/previous", response_model=SessionView)
async def previous_question(session_id: str, registry: Registry) -> dict[str, object]:
    session = _load(registry, session_id)
    session.go_to_previous()
    return serialize_session(session_id, session)


@router.post("/{session_id}/theme", response_model=SessionView)
async def toggle_theme(session_id: str, registry: Registry) -> dict[str, object]:
    """Switch between light and dark theme."""
    session = _load(registry, session_id)
    session.context.toggle_theme()
    return serialize_session(session_id, session)


@router.post("/{session_id}/submit", response_model=SessionSubmitted)
async def submit_session(
    session_id: str,
    registry: Registry,
    gateway: Gateway,
) -> dict[str, object]:
    """
    Submit the answered questions. The session is discarded on success and
    kept unchanged on failure so the student can try again.
    """
    session = _load(registry, session_id)
    with session_errors():
        result_id = await session.submit(gateway)
    registry.discard(session_id)
    return {
        "sessionId": session_id,
        "resultId": result_id,
        "answered": len(session.submission.responses),
        "duration": session.submission.duration,
    }


@router.delete("/{session_id}", status_code=204)
async def close_session(session_id: str, registry: Registry) -> None:
    """Leave the test without submitting."""
    if not registry.discard(validate_id("sessionId", session_id)):
        raise HTTPException(status_code=404, detail="Session not found")
