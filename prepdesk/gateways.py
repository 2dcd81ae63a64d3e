"""
TestGateway implementations.

DatabaseGateway serves sessions hosted by this process straight from the
database; HttpGateway talks to a running server over HTTP. Blocking work
runs in a worker thread so the event loop (and the session timer) keeps
going while a call is in flight.
"""
from __future__ import annotations

import asyncio
import logging

import requests
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from prepdesk.config import API_BASE_URL, HTTP_TIMEOUT_SECONDS
from prepdesk.database import SessionLocal
from prepdesk.models.submissions import SubmissionPayload
from prepdesk.services import submission_service, test_service
from prepdesk.session.errors import (
    ResultNotFound,
    SubmissionFailed,
    TestNotFound,
    TransportError,
)
from prepdesk.session.types import TestWithQuestions

logger = logging.getLogger(__name__)


class DatabaseGateway:
    """Reads tests and stores submissions through the service layer."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    async def fetch_test(self, test_id: str) -> TestWithQuestions:
        return await asyncio.to_thread(self._fetch_test, test_id)

    async def submit_test(self, payload: dict[str, object]) -> str:
        return await asyncio.to_thread(self._submit_test, payload)

    async def fetch_responses(self, result_id: str) -> dict[str, str]:
        return await asyncio.to_thread(self._fetch_responses, result_id)

    def _fetch_test(self, test_id: str) -> TestWithQuestions:
        try:
            with self.session_factory() as db:
                test = test_service.get_test(db, test_id)
                if test is None:
                    raise TestNotFound(test_id)
                return TestWithQuestions.from_payload(test_service.serialize_test(test))
        except SQLAlchemyError as exc:
            logger.error("Failed to load test %s: %s", test_id, exc)
            raise TransportError(f"Failed to load test {test_id}") from exc

    def _submit_test(self, payload: dict[str, object]) -> str:
        try:
            submission = SubmissionPayload.model_validate(payload)
            with self.session_factory() as db:
                return submission_service.create_submission(db, submission).id
        except ValidationError as exc:
            raise SubmissionFailed(f"Invalid submission: {exc}") from exc
        except HTTPException as exc:
            raise SubmissionFailed(str(exc.detail)) from exc
        except SQLAlchemyError as exc:
            logger.error("Failed to store submission: %s", exc)
            raise SubmissionFailed("Failed to store submission") from exc

    def _fetch_responses(self, result_id: str) -> dict[str, str]:
        try:
            with self.session_factory() as db:
                submission = submission_service.get_submission(db, result_id)
                if submission is None:
                    raise ResultNotFound(result_id)
                return submission_service.response_map(submission)
        except SQLAlchemyError as exc:
            logger.error("Failed to load result %s: %s", result_id, exc)
            raise TransportError(f"Failed to load result {result_id}") from exc


class HttpGateway:
    """Client of the prepdesk HTTP API."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        session: requests.Session | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    async def fetch_test(self, test_id: str) -> TestWithQuestions:
        return await asyncio.to_thread(self._fetch_test, test_id)

    async def submit_test(self, payload: dict[str, object]) -> str:
        return await asyncio.to_thread(self._submit_test, payload)

    async def fetch_responses(self, result_id: str) -> dict[str, str]:
        return await asyncio.to_thread(self._fetch_responses, result_id)

    def _get_json(self, path: str, not_found: Exception) -> dict[str, object]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("GET %s failed: %s", url, exc)
            raise TransportError(f"Request to {url} failed") from exc

        if response.status_code == 404:
            raise not_found
        try:
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as exc:
            raise TransportError(f"GET {url} returned {response.status_code}") from exc
        except ValueError as exc:
            raise TransportError(f"GET {url} returned invalid JSON") from exc

    def _fetch_test(self, test_id: str) -> TestWithQuestions:
        data = self._get_json(f"/api/tests/{test_id}", TestNotFound(test_id))
        try:
            return TestWithQuestions.from_payload(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError(f"Malformed test payload for {test_id}") from exc

    def _fetch_responses(self, result_id: str) -> dict[str, str]:
        data = self._get_json(f"/api/submissions/{result_id}", ResultNotFound(result_id))
        try:
            return {
                str(item["questionId"]): str(item["selectedAnswer"])
                for item in data.get("responses", [])
            }
        except (KeyError, TypeError, AttributeError) as exc:
            raise TransportError(f"Malformed result payload for {result_id}") from exc

    def _submit_test(self, payload: dict[str, object]) -> str:
        url = f"{self.base_url}/api/submissions"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return str(response.json()["resultId"])
        except requests.RequestException as exc:
            logger.warning("POST %s failed: %s", url, exc)
            raise SubmissionFailed("Submitting the test failed") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise SubmissionFailed("Unexpected response to submission") from exc
