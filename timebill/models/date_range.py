"""Date range model used by the period comparison engine."""

import datetime as dt

from pydantic import Field, model_validator

from timebill.models.base import BaseDataModel


class DateRange(BaseDataModel):
    """An inclusive range of calendar dates.

    Attributes:
        start: First day of the range (inclusive)
        end: Last day of the range (inclusive)

    Example:
        >>> r = DateRange(start=dt.date(2024, 6, 1), end=dt.date(2024, 6, 7))
        >>> r.day_count
        7
    """

    start: dt.date = Field(..., description="First day (inclusive)")
    end: dt.date = Field(..., description="Last day (inclusive)")

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        """Ensure the range is not reversed.

        Raises:
            ValueError: If end is before start
        """
        if self.end < self.start:
            raise ValueError(
                f"end ({self.end}) must not be before start ({self.start})"
            )
        return self

    @property
    def length(self) -> dt.timedelta:
        """Distance between start and end (zero for a single-day range)."""
        return self.end - self.start

    @property
    def day_count(self) -> int:
        return self.length.days + 1

    def contains(self, day: dt.date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}
