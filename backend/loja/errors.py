# Overview: Business error taxonomy shared by every service.


class LojaError(Exception):
    """Raised for caller-visible business errors; never retried."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class NotFoundError(LojaError):
    """Referenced product, customer, employee, sale, user or group does not exist."""


class InsufficientStockError(LojaError):
    """An outbound stock change would drive stock below zero."""


class InvalidArgumentError(LojaError, ValueError):
    """Non-positive quantity, unknown enum value, malformed price or CPF."""


class ConflictError(LojaError):
    """Business rule conflict: restricted delete or duplicate CPF."""
