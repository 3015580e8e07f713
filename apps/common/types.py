"""
Type system for the Municipal CMS Platform
Rust-inspired Result pattern and shared type aliases for the service layer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

# Type variables for generic Result
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type

# ===============================================================================
# RESULT TYPES
# ===============================================================================


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success result containing a value"""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value"""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get the success value (ignores default)"""
        return self.value

    def map(self, func: Callable[[T], Any]) -> Result[Any, Any]:
        """Transform the success value"""
        try:
            return Ok(func(self.value))
        except Exception as e:
            return Err(str(e))

    def and_then(self, func: Callable[[T], Result[Any, Any]]) -> Result[Any, Any]:
        """Chain operations that can fail"""
        try:
            return func(self.value)
        except Exception as e:
            return Err(str(e))

    def unwrap_err(self) -> Any:
        """Raises an exception since this is success, not error - provides consistent API"""
        raise ValueError(f"Called unwrap_err on Ok: {self.value}")


@dataclass(frozen=True)
class Err(Generic[E]):
    """Error result containing an error value"""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raises an exception - use unwrap_or() for safe access"""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Get the default value since this is an error"""
        return default

    def map(self, func: Callable[[Any], Any]) -> Result[Any, E]:
        """No-op for error results"""
        return self

    def and_then(self, func: Callable[[Any], Result[Any, Any]]) -> Result[Any, E]:
        """No-op for error results - return self"""
        return self

    def unwrap_err(self) -> E:
        """Get the error value"""
        return self.error


# Result type alias
Result = Ok[T] | Err[E]

# ===============================================================================
# SERVICE ERROR TYPES
# ===============================================================================


@dataclass(frozen=True)
class ServiceError:
    """🚨 Business error returned by service methods.

    ``code`` drives the HTTP status chosen by the API layer:
    ``not_found`` -> 404, ``conflict`` -> 409, ``forbidden`` -> 403,
    ``unauthorized`` -> 401, ``precondition`` -> 412, anything else -> 400.
    """

    message: str
    code: str = "validation_error"
    field: str | None = None
    details: dict[str, Any] | None = None

    STATUS_BY_CODE: ClassVar[dict[str, int]] = {
        "not_found": 404,
        "conflict": 409,
        "forbidden": 403,
        "unauthorized": 401,
        "precondition": 412,
    }

    def __str__(self) -> str:
        return self.message

    @property
    def http_status(self) -> int:
        return self.STATUS_BY_CODE.get(self.code, 400)


def not_found(message: str) -> Err[ServiceError]:
    return Err(ServiceError(message=message, code="not_found"))


def conflict(message: str, field: str | None = None) -> Err[ServiceError]:
    return Err(ServiceError(message=message, code="conflict", field=field))


def invalid(message: str, field: str | None = None, details: dict[str, Any] | None = None) -> Err[ServiceError]:
    return Err(ServiceError(message=message, code="validation_error", field=field, details=details))


def forbidden(message: str) -> Err[ServiceError]:
    return Err(ServiceError(message=message, code="forbidden"))


def precondition_failed(message: str, details: dict[str, Any] | None = None) -> Err[ServiceError]:
    return Err(ServiceError(message=message, code="precondition", details=details))


# ===============================================================================
# SHARED ALIASES
# ===============================================================================

JSONDict = dict[str, Any]
SortOrderUpdate = dict[str, int]  # {"id": 3, "sortOrder": 0}
EmailAddress = str
Slug = str
