"""Utility modules."""
from prepdesk.utils.json_utils import json_dump, read_json_file
from prepdesk.utils.time_utils import isoformat_utc, utc_now
from prepdesk.utils.validation import is_valid_id, validate_id

__all__ = [
    "isoformat_utc",
    "is_valid_id",
    "json_dump",
    "read_json_file",
    "utc_now",
    "validate_id",
]
