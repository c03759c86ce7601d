"""
Custom exceptions for marketplace statistics.

The reducer itself raises nothing in its default mode; these cover the opt-in
strict numeric validation and the snapshot loading done by the data layer.
"""

from pathlib import Path
from typing import Any


class MarketplaceStatsError(Exception):
    """Base exception for all marketplace statistics errors."""

    pass


class InvalidLineItemError(MarketplaceStatsError, ValueError):
    """Raised in strict mode when a line item carries a non-numeric quantity or price."""

    def __init__(self, order_id: Any, field_name: str, invalid_value: Any):
        self.order_id = order_id
        self.field_name = field_name
        self.invalid_value = invalid_value
        super().__init__(
            f"Order {order_id!r}: line item {field_name} is not a finite number "
            f"(got {invalid_value!r})"
        )


class SnapshotLoadError(MarketplaceStatsError):
    """Raised when the order snapshot cannot be read from its source."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        original_error: Exception | None = None,
    ):
        self.path = path
        self.original_error = original_error

        if path:
            message = f"{message} (path: {path})"

        if original_error:
            message = f"{message} (Original error: {original_error})"

        super().__init__(message)
