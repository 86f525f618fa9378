"""Validation utilities for the expense tracker application."""

import re
from typing import Any, Dict, List, Optional
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError


# Budget periods
VALID_PERIODS = ["weekly", "monthly", "yearly"]

# Dashboard period filter
VALID_PERIOD_MODES = ["month", "all"]

HEX_COLOR_PATTERN = r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$'


def validate_amount(amount: Any) -> Decimal:
    """
    Validate monetary amount.

    Zero is accepted; negative amounts are not.

    Args:
        amount: Amount to validate

    Returns:
        Validated amount as Decimal

    Raises:
        ValidationError: If amount is invalid
    """
    if amount is None or amount == '':
        raise ValidationError("Amount is required")

    if isinstance(amount, bool):
        raise ValidationError("Invalid amount format")

    try:
        decimal_amount = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("Invalid amount format")

    if not decimal_amount.is_finite():
        raise ValidationError("Invalid amount format")

    if decimal_amount < 0:
        raise ValidationError("Amount cannot be negative")

    # Ensure at most 2 decimal places
    if decimal_amount.as_tuple().exponent < -2:
        raise ValidationError("Amount can have at most 2 decimal places")

    return decimal_amount


def validate_date(value: Any) -> date:
    """
    Validate date format (ISO 8601: YYYY-MM-DD).

    Args:
        value: Date string (or date) to validate

    Returns:
        Parsed date

    Raises:
        ValidationError: If date is invalid
    """
    if not value:
        raise ValidationError("Date is required")

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        return datetime.strptime(str(value), '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")


def validate_category_name(name: Any) -> str:
    """
    Validate a category name reference.

    Args:
        name: Category name

    Returns:
        Validated category name

    Raises:
        ValidationError: If the name is missing
    """
    if not name or not isinstance(name, str) or not name.strip():
        raise ValidationError("Category is required")

    return sanitize_string(name, max_length=100)


def validate_period(period: str) -> str:
    """
    Validate budget period.

    Args:
        period: Period to validate

    Returns:
        Validated period

    Raises:
        ValidationError: If period is invalid
    """
    if not period:
        raise ValidationError("Period is required")

    period = str(period).lower()

    if period not in VALID_PERIODS:
        raise ValidationError(
            f"Invalid period. Must be one of: {', '.join(VALID_PERIODS)}"
        )

    return period


def validate_period_mode(period_mode: Optional[str]) -> str:
    """Validate the dashboard period filter, defaulting to the current month."""
    if not period_mode:
        return "month"

    period_mode = period_mode.lower()

    if period_mode not in VALID_PERIOD_MODES:
        raise ValidationError(
            f"Invalid period mode. Must be one of: {', '.join(VALID_PERIOD_MODES)}"
        )

    return period_mode


def validate_color(color: Any) -> str:
    """
    Validate a hex color string such as ``#2E7D32``.

    Raises:
        ValidationError: If the color is not a hex string
    """
    if not color or not isinstance(color, str):
        raise ValidationError("Color is required")

    if not re.match(HEX_COLOR_PATTERN, color):
        raise ValidationError("Invalid color. Use a hex value such as #2E7D32")

    return color


def validate_tags(tags: Any) -> List[str]:
    """Validate expense tags."""
    if tags is None:
        return []

    if not isinstance(tags, (list, tuple)):
        raise ValidationError("Tags must be a list")

    return [sanitize_string(tag, max_length=50) for tag in tags]


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> None:
    """
    Validate that required fields are present in data.

    Args:
        data: Data dictionary to validate
        required_fields: List of required field names

    Raises:
        ValidationError: If any required field is missing
    """
    missing_fields = [
        field for field in required_fields
        if field not in data or data[field] is None or data[field] == ''
    ]

    if missing_fields:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing_fields)}"
        )


def sanitize_string(value: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize string input.

    Args:
        value: String to sanitize
        max_length: Optional maximum length

    Returns:
        Sanitized string

    Raises:
        ValidationError: If string is invalid
    """
    if not isinstance(value, str):
        raise ValidationError("Value must be a string")

    # Remove leading/trailing whitespace
    value = value.strip()

    if max_length and len(value) > max_length:
        raise ValidationError(f"Value exceeds maximum length of {max_length}")

    return value
