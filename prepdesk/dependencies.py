"""FastAPI dependencies."""
from prepdesk.database import SessionLocal
from prepdesk.gateways import DatabaseGateway
from prepdesk.session import TestGateway


def get_gateway() -> TestGateway:
    """Backend used by hosted sessions to load tests and submit answers."""
    return DatabaseGateway(SessionLocal)
