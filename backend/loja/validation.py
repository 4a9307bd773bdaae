from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from .errors import InvalidArgumentError


CENT = Decimal("0.01")

# NUMERIC(10, 2) upper bound; prevents overflow and nonsensical prices
MAX_PRICE = Decimal("99999999.99")

CPF_LENGTH = 11


def _coerce_int(value: Any, field: str) -> int:
    # bool is a subclass of int; never accept it as a quantity
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise InvalidArgumentError(f"{field} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if "e" in stripped.lower():
            raise InvalidArgumentError(f"{field} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if "." in stripped:
            raise InvalidArgumentError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise InvalidArgumentError(f"{field} must be an integer")
    if isinstance(value, float):
        raise InvalidArgumentError(f"{field} must be an integer, not a decimal")
    raise InvalidArgumentError(f"{field} must be an integer")


def require_positive_int(value: Any, field: str) -> int:
    number = _coerce_int(value, field)
    if number <= 0:
        raise InvalidArgumentError(f"{field} must be positive", details={field: number})
    return number


def require_non_negative_int(value: Any, field: str) -> int:
    number = _coerce_int(value, field)
    if number < 0:
        raise InvalidArgumentError(f"{field} cannot be negative", details={field: number})
    return number


def to_decimal(value: Any, field: str) -> Decimal:
    """
    Convert a numeric input to Decimal without binary float artifacts.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not 0.1000000000000000055...
    """
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError(f"{field} must be a number")
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float, str)):
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidArgumentError(f"{field} must be a number")
    else:
        raise InvalidArgumentError(f"{field} must be a number")
    if not number.is_finite():
        raise InvalidArgumentError(f"{field} must be a finite number")
    return number


def to_money(value: Any, field: str) -> Decimal:
    """Parse a price, rounded half-up to the cent; sign is left to the caller."""
    amount = to_decimal(value, field).quantize(CENT, rounding=ROUND_HALF_UP)
    if abs(amount) > MAX_PRICE:
        raise InvalidArgumentError(f"{field} exceeds maximum allowed ({MAX_PRICE})")
    return amount


def require_non_negative_money(value: Any, field: str) -> Decimal:
    amount = to_money(value, field)
    if amount < 0:
        raise InvalidArgumentError(f"{field} cannot be negative", details={field: str(amount)})
    return amount


def require_text(value: Any, field: str, max_length: int) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{field} is required")
    text = value.strip()
    if len(text) > max_length:
        raise InvalidArgumentError(f"{field} must be at most {max_length} characters")
    return text


def optional_text(value: Any, field: str, max_length: int | None = None) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{field} must be a string")
    text = value.strip()
    if not text:
        return None
    if max_length is not None and len(text) > max_length:
        raise InvalidArgumentError(f"{field} must be at most {max_length} characters")
    return text


def normalize_cpf(value: Any) -> str | None:
    """
    Normalize a CPF to its 11 digits.

    - None / "" -> None (CPF is optional)
    - "123.456.789-09" -> "12345678909"
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError("cpf must be a string")
    digits = value.strip().replace(".", "").replace("-", "")
    if not digits:
        return None
    if len(digits) != CPF_LENGTH or not digits.isdigit():
        raise InvalidArgumentError("cpf must have exactly 11 digits", details={"cpf": value})
    return digits
