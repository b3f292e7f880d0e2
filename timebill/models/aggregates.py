"""Result structures produced by the grouping engine.

These are plain dataclasses rather than Pydantic models: they are built
internally from already-validated input and only need to be serialized.
"""

from dataclasses import asdict, dataclass
from typing import Optional

UNASSIGNED_GROUP_ID = "unassigned"
DEFAULT_UNASSIGNED_LABEL = "Not set"


@dataclass
class AggregateGroup:
    """Total time recorded for one group of entries.

    Attributes:
        id: Group identifier (an entity id, a bucket key or "unassigned")
        label: Human-readable group name
        total_seconds: Sum of the normalized durations in this group
        percentage_of_total: Share of the grand total (0-100)
        color: Display color from the palette

    Example:
        >>> group = AggregateGroup(
        ...     id="P1",
        ...     label="Website",
        ...     total_seconds=3600,
        ...     percentage_of_total=25.0,
        ...     color="#3b82f6",
        ... )
        >>> group.to_dict()["total_seconds"]
        3600
    """

    id: str
    label: str
    total_seconds: int
    percentage_of_total: float
    color: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class GroupSummary:
    """Headline figures for a grouped report.

    Attributes:
        total_seconds: Grand total across all groups
        group_count: Number of groups
        top_group: Group with the most time, or None when there is no data
    """

    total_seconds: int
    group_count: int
    top_group: Optional[AggregateGroup]

    def to_dict(self) -> dict:
        return {
            "total_seconds": self.total_seconds,
            "group_count": self.group_count,
            "top_group": self.top_group.to_dict() if self.top_group else None,
        }
