"""Tagged results for lookups that can legitimately come back empty.

A table lookup before the first recorded event or an eclipse search that
finds nothing is not an error: callers get an ``Unavailable`` value carrying
the reason, and ``Available`` otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar, Union

T = TypeVar("T")


class UnavailableReason(str, Enum):
    NO_DATA_BEFORE_TABLE_START = "no_data_before_table_start"
    NO_DATA_AFTER_TABLE_END = "no_data_after_table_end"
    ECLIPSE_SEARCH_EXHAUSTED = "eclipse_search_exhausted"
    MISSING_BODIES = "missing_bodies"


@dataclass(frozen=True)
class Available(Generic[T]):
    value: T

    available: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        value = self.value
        payload = value.to_dict() if hasattr(value, "to_dict") else value
        return {"available": True, "value": payload}


@dataclass(frozen=True)
class Unavailable:
    reason: UnavailableReason
    message: str = ""

    available: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "available": False,
            "reason": self.reason.value,
            "message": self.message,
        }


Result = Union[Available[T], Unavailable]
