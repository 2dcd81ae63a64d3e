"""API route modules."""
from prepdesk.routes import sessions, submissions, tests

__all__ = ["sessions", "submissions", "tests"]
