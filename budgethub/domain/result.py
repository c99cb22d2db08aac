"""
Tagged result type shared by query functions, batch engines and job handlers.

    Ok(data, message)      - the operation ran (possibly with per-item failures inside data)
    Err(kind, message)     - the operation could not run at all

Usage:
    result = get_all_hubs(db)
    if isinstance(result, Err):
        return result
    for hub in result.data:
        ...
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    INFRASTRUCTURE = "infrastructure"  # store unreachable, fetch failed
    VALIDATION = "validation"  # bad job input (e.g. month=13)


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T
    message: str = ""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
