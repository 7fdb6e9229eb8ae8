"""Content fingerprints for tamper evidence."""
import hashlib
import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict


def _default(value: Any):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not hashable content")


class HashService:
    """SHA-256 over canonical JSON.

    The payloads built by the services include the creation timestamp, so a
    digest identifies one creation (or update) event. It is not recomputed
    from the current row on read.
    """

    HASH_ALGORITHM = "sha256"

    @staticmethod
    def canonical(record: Dict[str, Any]) -> bytes:
        # Sort keys for consistent hashing
        return json.dumps(
            record, sort_keys=True, separators=(',', ':'), default=_default
        ).encode('utf-8')

    @staticmethod
    def fingerprint(record: Dict[str, Any]) -> str:
        return hashlib.sha256(HashService.canonical(record)).hexdigest()
