"""Enumerations for grouping dimensions, bucket units and averaging policies."""

from enum import Enum
from typing import Optional, Union

from timebill.errors import UnknownDimensionError


class BucketUnit(str, Enum):
    """Sub-interval used for calendar bucketing."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, value: Union[str, "BucketUnit"]) -> "BucketUnit":
        """Convert a string or enum value, failing fast on unknown values.

        Raises:
            UnknownDimensionError: If the value is not a known bucket unit
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownDimensionError(
                value, [m.value for m in cls], kind="bucket unit"
            ) from None


class GroupDimension(str, Enum):
    """Axis along which entries are grouped."""

    PROJECT = "project"
    TEAM = "team"
    USER = "user"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, value: Union[str, "GroupDimension"]) -> "GroupDimension":
        """Convert a string or enum value, failing fast on unknown values.

        Raises:
            UnknownDimensionError: If the value is not a known dimension
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownDimensionError(value, [m.value for m in cls]) from None

    @property
    def bucket_unit(self) -> Optional[BucketUnit]:
        """The calendar bucket unit for time dimensions, None otherwise."""
        if self in (GroupDimension.DAY, GroupDimension.WEEK, GroupDimension.MONTH):
            return BucketUnit(self.value)
        return None


class AveragePolicy(str, Enum):
    """How period averages are computed.

    NON_EMPTY divides by the number of buckets that received time, which is
    what summary tables show. CALENDAR divides by every calendar bucket in the
    range and zero-fills the bucket series, which is what charts need.
    """

    NON_EMPTY = "non_empty"
    CALENDAR = "calendar"

    @classmethod
    def parse(cls, value: Union[str, "AveragePolicy"]) -> "AveragePolicy":
        try:
            return cls(value)
        except ValueError:
            raise UnknownDimensionError(
                value, [m.value for m in cls], kind="average policy"
            ) from None
