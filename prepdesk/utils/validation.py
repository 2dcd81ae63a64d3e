"""Validation utilities."""
import re

from fastapi import HTTPException

ID_REGEX = r"^[A-Za-z0-9_.:-]{1,64}$"
_ID_PATTERN = re.compile(ID_REGEX)


def is_valid_id(value: str) -> bool:
    """Identifiers must be URL-safe and never a bare path segment like '..'."""
    return bool(_ID_PATTERN.match(value)) and value not in (".", "..")


def validate_id(name: str, value: str) -> str:
    """Validate an identifier taken from the URL or a request body."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if not is_valid_id(cleaned):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned
