"""
Result type for gateway operations.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from src.shurjopay.errors import ShurjoPayError


T = TypeVar("T")


@dataclass
class GatewayResult(Generic[T]):
    """
    Outcome of a gateway operation: either a value or the error that prevented it.

    unwrap_or_none() gives the historical behaviour where any failure reads as
    an absent result; unwrap() raises the underlying error instead.
    """

    value: Optional[T] = None
    error: Optional[ShurjoPayError] = None

    @classmethod
    def ok(cls, value: T) -> "GatewayResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ShurjoPayError) -> "GatewayResult[T]":
        return cls(error=error)

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    def unwrap_or_none(self) -> Optional[T]:
        return self.value if self.error is None else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "success": self.success,
            "error": str(self.error) if self.error else None,
            "error_code": self.error.error_code if self.error else None,
        }
