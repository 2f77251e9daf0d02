from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Reason(Enum):
    """Why an operation was refused. Expected outcomes, not faults."""
    INVALID = "invalid"
    ALREADY_EXISTS = "already exists"
    NOT_FOUND = "not found"
    ALREADY_BORROWED = "already borrowed"
    BOOK_BORROWED = "cannot remove a borrowed book"
    NOT_HELD = "don't have this book"
    WRONG_ROLE = "wrong role"


@dataclass
class Result:
    """Outcome of a catalog or role operation.

    ``warning`` carries a persistence failure: the in-memory change has
    already been applied even when it is set.
    """
    ok: bool
    message: str
    reason: Optional[Reason] = None
    data: Any = None
    warning: Optional[str] = None

    @classmethod
    def success(cls, message: str, data: Any = None, warning: Optional[str] = None) -> "Result":
        return cls(ok=True, message=message, data=data, warning=warning)

    @classmethod
    def failure(cls, reason: Reason, message: str) -> "Result":
        return cls(ok=False, message=message, reason=reason)

    def __bool__(self) -> bool:
        return self.ok
