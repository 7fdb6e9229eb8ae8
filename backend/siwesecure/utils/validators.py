"""Validation utilities for request payloads."""
import math
from typing import Any, Dict, List, Optional

from siwesecure.utils.errors import ValidationError


class Validator:
    """Validation helper class."""

    @staticmethod
    def require_json(data: Any) -> Dict:
        """Ensure the request body decoded to a JSON object."""
        if not isinstance(data, dict):
            raise ValidationError("Request body must be JSON")
        return data

    @staticmethod
    def validate_required_fields(data: Dict, required_fields: List[str]) -> None:
        """Validate required fields in data."""
        missing = [field for field in required_fields if data.get(field) in (None, '')]
        if missing:
            raise ValidationError(f"Missing required field: {', '.join(missing)}")

    @staticmethod
    def number(value: Any, field: str) -> float:
        """Coerce a finite real number, rejecting booleans and numeric strings."""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{field} must be a number")
        value = float(value)
        if math.isnan(value) or math.isinf(value):
            raise ValidationError(f"{field} must be a finite number")
        return value

    @staticmethod
    def latitude(value: Any, field: str = 'latitude') -> float:
        value = Validator.number(value, field)
        if not -90.0 <= value <= 90.0:
            raise ValidationError(f"{field} must be between -90 and 90")
        return value

    @staticmethod
    def longitude(value: Any, field: str = 'longitude') -> float:
        value = Validator.number(value, field)
        if not -180.0 <= value <= 180.0:
            raise ValidationError(f"{field} must be between -180 and 180")
        return value

    @staticmethod
    def positive_int(value: Any, field: str) -> int:
        """Validate an integer identifier or counter (>= 1)."""
        if isinstance(value, bool):
            raise ValidationError(f"{field} must be a positive integer")
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if not isinstance(value, int) or value < 1:
            raise ValidationError(f"{field} must be a positive integer")
        return value

    @staticmethod
    def optional_positive_int(value: Any, field: str) -> Optional[int]:
        if value in (None, ''):
            return None
        return Validator.positive_int(value, field)

    @staticmethod
    def text(value: Any, field: str, max_length: int = 5000, required: bool = True) -> Optional[str]:
        """Validate a free-text field."""
        if value is None:
            if required:
                raise ValidationError(f"{field} is required")
            return None
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string")
        value = value.strip()
        if required and not value:
            raise ValidationError(f"{field} is required")
        if len(value) > max_length:
            raise ValidationError(f"{field} is too long")
        return value
