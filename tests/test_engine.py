import asyncio

import pytest

from prepdesk.session import (
    QuestionStatus,
    ReadOnlySession,
    ResultNotFound,
    ReviewOutcome,
    SessionContext,
    SessionMode,
    SubmissionFailed,
    TestNotFound,
    TestSession,
    TestSessionError,
    Theme,
)
from prepdesk.session.timer import SessionTimer


def open_session(gateway, context: SessionContext | None = None, test_id: str = "t1") -> TestSession:
    context = context or SessionContext(user_id="student-1")
    return asyncio.run(TestSession.open(gateway, test_id, context))


def test_walkthrough_select_review_navigate_submit(fake_gateway) -> None:
    session = open_session(fake_gateway)
    assert session.current_question.question_id == "Q1"
    assert session.current_question.status is QuestionStatus.CURRENT

    session.select_option("Q1", "B")
    assert session.store.get("Q1").status is QuestionStatus.ATTEMPTED

    session.toggle_review("Q1")
    assert session.store.get("Q1").status is QuestionStatus.REVIEW
    assert session.store.get("Q1").selected_option == "B"

    session.go_to_question(1)
    assert session.store.get("Q1").status is QuestionStatus.REVIEW
    assert session.store.get("Q2").status is QuestionStatus.CURRENT

    session.go_to_question(0)
    assert session.store.get("Q1").status is QuestionStatus.CURRENT
    assert session.is_marked_for_review("Q1")

    result_id = asyncio.run(session.submit(fake_gateway))
    assert result_id == "result-1"
    assert fake_gateway.submitted[0]["responses"] == [
        {"questionId": "Q1", "selectedAnswer": "B"}
    ]
    assert fake_gateway.submitted[0]["userId"] == "student-1"
    assert session.finished


def test_open_unknown_test(fake_gateway) -> None:
    with pytest.raises(TestNotFound):
        open_session(fake_gateway, test_id="nope")


def test_failed_submission_keeps_progress_for_retry(fake_gateway) -> None:
    session = open_session(fake_gateway)
    session.select_option("Q1", "A")
    session.toggle_review("Q1")
    before = [(entry.status, entry.selected_option) for entry in session.progress]

    fake_gateway.fail_submit = True
    with pytest.raises(SubmissionFailed):
        asyncio.run(session.submit(fake_gateway))
    assert not session.finished
    assert [(entry.status, entry.selected_option) for entry in session.progress] == before

    fake_gateway.fail_submit = False
    assert asyncio.run(session.submit(fake_gateway)) == "result-1"


def test_submitted_session_rejects_changes(fake_gateway) -> None:
    session = open_session(fake_gateway)
    asyncio.run(session.submit(fake_gateway))
    with pytest.raises(ReadOnlySession):
        session.select_option("Q2", "A")
    with pytest.raises(ReadOnlySession):
        asyncio.run(session.submit(fake_gateway))


def test_review_mode_prefills_answers_and_is_read_only(fake_gateway) -> None:
    fake_gateway.results["r-1"] = {"Q1": "B", "Q3": "C"}
    context = SessionContext(user_id="student-1", mode=SessionMode.REVIEW, result_id="r-1")
    session = open_session(fake_gateway, context)

    assert [entry.selected_option for entry in session.progress] == ["B", None, "C"]
    assert session.review_outcome("Q1") is ReviewOutcome.CORRECT
    assert session.review_outcome("Q3") is ReviewOutcome.INCORRECT

    session.select_option("Q2", "A")
    session.toggle_review("Q1")
    assert session.store.get("Q2").selected_option is None
    assert not session.is_marked_for_review("Q1")

    session.go_to_next()
    assert session.current_index == 1

    with pytest.raises(ReadOnlySession):
        asyncio.run(session.submit(fake_gateway))


def test_review_mode_requires_result(fake_gateway) -> None:
    with pytest.raises(TestSessionError):
        open_session(fake_gateway, SessionContext(user_id="u", mode=SessionMode.REVIEW))
    with pytest.raises(ResultNotFound):
        open_session(
            fake_gateway,
            SessionContext(user_id="u", mode=SessionMode.REVIEW, result_id="missing"),
        )


def test_review_mode_never_starts_timer(fake_gateway) -> None:
    fake_gateway.results["r-1"] = {}

    async def scenario() -> tuple[bool, str]:
        context = SessionContext(user_id="u", mode=SessionMode.REVIEW, result_id="r-1")
        session = await TestSession.open(
            fake_gateway, "t1", context, timer=SessionTimer(interval=0.01)
        )
        session.start()
        await asyncio.sleep(0.05)
        return session.timer.running, session.formatted_time

    running, elapsed = asyncio.run(scenario())
    assert running is False
    assert elapsed == "00h:00m:00s"


def test_timer_runs_during_navigation_and_stops_on_submit(fake_gateway) -> None:
    async def scenario() -> tuple[int, bool]:
        session = await TestSession.open(
            fake_gateway, "t1", SessionContext(user_id="u"), timer=SessionTimer(interval=0.01)
        )
        session.start()
        await asyncio.sleep(0.05)
        session.go_to_next()
        await asyncio.sleep(0.05)
        await session.submit(fake_gateway)
        return session.timer.elapsed.seconds, session.timer.running

    ticks, running = asyncio.run(scenario())
    assert ticks > 0
    assert running is False


def test_theme_lives_in_context(fake_gateway) -> None:
    session = open_session(fake_gateway, SessionContext(user_id="u", theme=Theme.DARK))
    assert session.context.toggle_theme() is Theme.LIGHT
    assert session.context.theme is Theme.LIGHT


def test_answers_are_frozen_while_submit_is_in_flight(fake_gateway) -> None:
    fake_gateway.submit_delay = 0.05

    async def scenario() -> tuple[str, list[type[Exception]]]:
        session = await TestSession.open(fake_gateway, "t1", SessionContext(user_id="u"))
        session.select_option("Q1", "B")
        pending = asyncio.create_task(session.submit(fake_gateway))
        await asyncio.sleep(0)

        rejected = []
        for attempt in (
            lambda: session.select_option("Q2", "C"),
            lambda: session.toggle_review("Q1"),
        ):
            try:
                attempt()
            except ReadOnlySession as exc:
                rejected.append(type(exc))
        try:
            await session.submit(fake_gateway)
        except ReadOnlySession as exc:
            rejected.append(type(exc))

        return await pending, rejected

    result_id, rejected = asyncio.run(scenario())

    assert result_id == "result-1"
    assert rejected == [ReadOnlySession] * 3
    assert len(fake_gateway.submitted) == 1
    assert fake_gateway.submitted[0]["responses"] == [{"questionId": "Q1", "selectedAnswer": "B"}]


def test_failed_submit_unfreezes_answers(fake_gateway) -> None:
    session = open_session(fake_gateway)
    fake_gateway.fail_submit = True
    with pytest.raises(SubmissionFailed):
        asyncio.run(session.submit(fake_gateway))

    session.select_option("Q2", "C")
    assert session.store.get("Q2").selected_option == "C"
