"""Operation results — success value or numeric error code, never both.

Every mutating registry operation returns a Result:

    result = registry.create_job("client-1", "render my video")
    if result.ok:
        job_id = result.value
    else:
        print(result.code, result.message)

Callers that prefer exceptions can call unwrap(), which raises
MarketplaceError on failure.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")


class ErrorCode(int, enum.Enum):
    """Stable numeric error codes exposed to callers."""
    ALREADY_REGISTERED = 100
    NOT_REGISTERED = 101
    PROVIDER_UNAVAILABLE = 102
    INVALID_JOB_STATE_ACCEPT = 103
    INVALID_JOB_STATE_COMPLETE = 104
    UNAUTHORIZED_CLIENT = 105
    UNAUTHORIZED_ADMIN = 106


class MarketplaceError(Exception):
    """Raised by Failure.unwrap()."""

    def __init__(self, code: ErrorCode, message: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{int(code)}] {message or code.name}")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful operation carrying its value."""
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """A rejected operation carrying its error code."""
    code: ErrorCode
    message: str = ""

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise MarketplaceError(self.code, self.message)


Result = Union[Success[T], Failure]
