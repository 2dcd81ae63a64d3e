import argparse
import asyncio
import logging
import string
import sys
from pathlib import Path

from fastapi import HTTPException
from pydantic import ValidationError

from prepdesk.config import API_BASE_URL, DEFAULT_USER_ID
from prepdesk.database import SessionLocal, init_db
from prepdesk.gateways import HttpGateway
from prepdesk.logging_setup import setup_console_logging
from prepdesk.models import TestImport
from prepdesk.services import submission_service, test_service
from prepdesk.session import (
    SessionContext,
    SubmissionFailed,
    TestSession,
    TestSessionError,
)
from prepdesk.utils import json_dump, read_json_file

log = logging.getLogger("prepdesk.cli")

HELP = """Commands:
  n / p        next / previous question
  g NUMBER     go to question NUMBER
  a LETTER     answer the displayed question (A, B, C, ...)
  r            mark / unmark the displayed question for review
  l            list all questions
  s            submit the test
  q            quit without submitting"""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Prepdesk tools")
    commands = parser.add_subparsers(dest="command", required=True)

    import_cmd = commands.add_parser("import", help="Import a test from a JSON file")
    import_cmd.add_argument("file", type=Path, help="Path to the test JSON document")

    take_cmd = commands.add_parser("take", help="Take a test in the terminal")
    take_cmd.add_argument("test_id", help="Test identifier")
    take_cmd.add_argument("--api-url", default=API_BASE_URL, help="Server base URL")
    take_cmd.add_argument("--user", default=DEFAULT_USER_ID, help="Student identifier")

    result_cmd = commands.add_parser("result", help="Print a stored submission as JSON")
    result_cmd.add_argument("result_id", help="Result identifier")
    return parser.parse_args(argv)


def import_test(path: Path) -> str:
    """Validate a test document and store it; returns the test id."""
    payload = TestImport.model_validate(read_json_file(path))
    init_db()
    with SessionLocal() as db:
        return test_service.import_test(db, payload).id


def show_result(result_id: str) -> bool:
    """Print a stored submission; returns False when it does not exist."""
    init_db()
    with SessionLocal() as db:
        submission = submission_service.get_submission(db, result_id)
        if submission is None:
            return False
        print(json_dump(submission_service.serialize_submission(submission)))
    return True


def option_letter(index: int) -> str:
    return string.ascii_uppercase[index]


def render(session: TestSession) -> None:
    entry = session.current_question
    if entry is None:
        print("This test has no questions.")
        return
    question = entry.question
    marked = " [review]" if session.is_marked_for_review(question.id) else ""
    counts = session.counts()
    print()
    print(
        f"{session.formatted_time}  answered {counts['attempted']}"
        f"  review {counts['review']}  unattempted {counts['unattempted']}"
    )
    print(f"Q{question.order} ({question.subject.value}){marked}: {question.text}")
    for index, option in enumerate(question.options):
        chosen = "*" if option == entry.selected_option else " "
        print(f" {chosen} {option_letter(index)}. {option}")


def render_panel(session: TestSession) -> None:
    for group in session.subject_groups():
        print(f"{group.subject.value}: questions {group.first_order}-{group.last_order}")
        cells = []
        for entry in group.entries:
            flag = "R" if session.is_marked_for_review(entry.question_id) else ""
            answered = "+" if entry.selected_option else ""
            cells.append(f"{entry.question.order}{answered}{flag}")
        print("  " + " ".join(cells))


def apply_command(session: TestSession, command: str, arg: str) -> None:
    """Apply one navigation/answer command to the session."""
    entry = session.current_question
    if command == "n":
        session.go_to_next()
    elif command == "p":
        session.go_to_previous()
    elif command == "g":
        session.go_to_question(int(arg) - 1)
    elif command == "a" and entry is not None:
        letters = string.ascii_uppercase[: len(entry.question.options)]
        letter = arg.strip().upper()
        if len(letter) != 1 or letter not in letters:
            print(f"Choose one of {', '.join(letters)}")
            return
        session.select_option(entry.question_id, entry.question.options[letters.index(letter)])
    elif command == "r" and entry is not None:
        session.toggle_review(entry.question_id)
    elif command == "l":
        render_panel(session)
    else:
        print(HELP)


async def take_test(gateway: HttpGateway, test_id: str, user_id: str) -> str | None:
    """
    Interactive test-taking loop. Input is read in a worker thread so the
    session timer keeps running while the student thinks.
    """
    session = await TestSession.open(gateway, test_id, SessionContext(user_id=user_id))
    print(f"{session.test.title} ({session.test.duration} minutes)")
    print(HELP)
    session.start()
    try:
        while True:
            render(session)
            line = (await asyncio.to_thread(input, "> ")).strip()
            command, _, arg = line.partition(" ")
            if command == "q":
                return None
            if command == "s":
                try:
                    result_id = await session.submit(gateway)
                except SubmissionFailed as exc:
                    print(f"Submission failed, your answers are kept: {exc}")
                    continue
                print(f"Submitted. Result id: {result_id}")
                return result_id
            try:
                apply_command(session, command, arg)
            except (TestSessionError, ValueError) as exc:
                print(f"Error: {exc}")
    finally:
        session.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_console_logging(logging.INFO)

    if args.command == "import":
        try:
            test_id = import_test(args.file)
        except (OSError, ValueError, ValidationError) as exc:
            log.error("Cannot import %s: %s", args.file, exc)
            return 1
        except HTTPException as exc:
            log.error("Cannot import %s: %s", args.file, exc.detail)
            return 1
        print(f"Imported test {test_id}")
        return 0

    if args.command == "result":
        if not show_result(args.result_id):
            log.error("Result %s not found", args.result_id)
            return 1
        return 0

    gateway = HttpGateway(args.api_url)
    try:
        asyncio.run(take_test(gateway, args.test_id, args.user))
    except TestSessionError as exc:
        log.error("%s", exc)
        return 1
    except (KeyboardInterrupt, EOFError):
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
