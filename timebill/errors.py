"""Error taxonomy of the aggregation and billing engine.

Conditions the caller must decide on are raised as ``EngineError``
subclasses carrying the offending identifiers. A zero baseline in a
percent-change calculation is not an error condition at all: it is reported
as a ``DivisionUndefined`` value so that report views can render "N/A".
"""

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, Optional


class EngineError(Exception):
    """Base exception for all engine errors."""


class InvalidRangeError(EngineError):
    """Raised when an entry yields a negative duration.

    This happens when ``end_time`` lies before ``start_time``, when the break
    exceeds the recorded interval, or when ``now`` lies before the start of a
    running entry.

    Attributes:
        entry_id: Identifier of the offending entry
        start_time: Entry start instant
        end_time: Effective end instant (``now`` for running entries)
        seconds: The negative duration that was computed
    """

    def __init__(
        self,
        entry_id: str,
        start_time: dt.datetime,
        end_time: dt.datetime,
        seconds: int,
    ):
        self.entry_id = entry_id
        self.start_time = start_time
        self.end_time = end_time
        self.seconds = seconds
        super().__init__(
            f"Entry '{entry_id}' has an invalid range: {start_time.isoformat()} "
            f"to {end_time.isoformat()} yields a negative duration "
            f"({seconds} seconds)"
        )


class MissingRateError(EngineError):
    """Raised when a billing group has no configured hourly rate.

    Attributes:
        group_id: Identifier of the group without a rate
    """

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"No billing rate configured for group '{group_id}'")


class UnknownDimensionError(EngineError, ValueError):
    """Raised when a named choice is not recognised.

    Covers grouping dimensions, bucket units, averaging policies and date
    presets; ``kind`` names which of them was looked up.

    Attributes:
        value: The unrecognised value
        allowed: The accepted values
        kind: What was being looked up (e.g. "dimension", "preset")
    """

    def __init__(
        self,
        value: object,
        allowed: Optional[Iterable[str]] = None,
        kind: str = "dimension",
    ):
        self.value = value
        self.allowed = list(allowed) if allowed is not None else []
        self.kind = kind
        message = f"Unknown {kind}: {value!r}"
        if self.allowed:
            message += f". Must be one of: {', '.join(self.allowed)}"
        super().__init__(message)


class TimezoneMismatchError(EngineError, ValueError):
    """Raised when a running entry and ``now`` disagree on timezone awareness.

    Attributes:
        entry_id: Identifier of the running entry
    """

    def __init__(self, entry_id: str, start_time: dt.datetime, now: dt.datetime):
        self.entry_id = entry_id
        self.start_time = start_time
        self.now = now
        start_kind = "aware" if start_time.tzinfo is not None else "naive"
        now_kind = "aware" if now.tzinfo is not None else "naive"
        super().__init__(
            f"Entry '{entry_id}' is running with {start_kind} start_time but "
            f"now is {now_kind}; both must be timezone-aware or both naive"
        )


@dataclass(frozen=True)
class DivisionUndefined:
    """Percent change against a zero baseline.

    Returned in place of a number; the caller decides whether to display
    "N/A" or "+inf".

    Attributes:
        current: The current-period value
        previous: The (zero) baseline value
    """

    current: float
    previous: float

    def to_dict(self) -> dict:
        return {
            "error": "DivisionUndefined",
            "current": self.current,
            "previous": self.previous,
        }

    def __str__(self) -> str:
        return "N/A"
