"""Input models for the aggregation engine.

This module defines the TimeEntry record handed over by the persistence layer,
the Project reference used for labels and team association, and the
ReferenceData bundle that carries lookup tables into the grouping engine.
"""

import datetime as dt
from typing import Dict, Optional

from pydantic import Field, field_validator, model_validator

from timebill.models.base import BaseDataModel


class TimeEntry(BaseDataModel):
    """Represents one recorded interval of work.

    An entry without ``end_time`` is still running; its duration is measured
    against a caller-supplied ``now``. The model intentionally accepts an
    ``end_time`` before ``start_time``: that condition is reported by the
    duration normalizer as an ``InvalidRangeError``.

    Attributes:
        id: Entry identifier
        user_id: User who recorded the entry (optional)
        project_id: Associated project (optional)
        task_id: Associated task (optional)
        start_time: Start instant
        end_time: End instant, or None while running
        description: Optional free-text description
        break_minutes: Break taken inside the interval, deducted from duration

    Example:
        >>> entry = TimeEntry(
        ...     id="e1",
        ...     user_id="u1",
        ...     project_id="P1",
        ...     start_time=dt.datetime(2024, 6, 3, 9, 0),
        ...     end_time=dt.datetime(2024, 6, 3, 10, 30),
        ... )
        >>> entry.is_running
        False
    """

    id: str = Field(..., min_length=1, description="Entry identifier")
    user_id: Optional[str] = Field(None, description="User identifier")
    project_id: Optional[str] = Field(None, description="Project identifier")
    task_id: Optional[str] = Field(None, description="Task identifier")
    start_time: dt.datetime = Field(..., description="Start instant")
    end_time: Optional[dt.datetime] = Field(None, description="End instant")
    description: Optional[str] = Field(None, description="Optional description")
    break_minutes: int = Field(0, ge=0, description="Break duration in minutes")

    @field_validator("user_id", "project_id", "task_id")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty or whitespace-only associations as missing.

        Args:
            v: The value to normalize

        Returns:
            The stripped value, or None when nothing is left
        """
        if v is None:
            return None
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def validate_timezone_awareness(self) -> "TimeEntry":
        """Ensure start and end agree on timezone awareness.

        Returns:
            The validated model instance

        Raises:
            ValueError: If one instant is naive and the other is aware
        """
        if self.end_time is not None:
            start_aware = self.start_time.tzinfo is not None
            end_aware = self.end_time.tzinfo is not None
            if start_aware != end_aware:
                raise ValueError(
                    f"start_time and end_time of entry {self.id} must both be "
                    "timezone-aware or both be naive"
                )
        return self

    @property
    def is_running(self) -> bool:
        """Whether the entry has no end time yet."""
        return self.end_time is None


class Project(BaseDataModel):
    """External project reference.

    Attributes:
        id: Project identifier
        name: Display name
        team_id: Owning team, if known

    Example:
        >>> Project(id="P1", name="Website", team_id="T1").team_id
        'T1'
    """

    id: str = Field(..., min_length=1, description="Project identifier")
    name: str = Field(..., min_length=1, description="Project name")
    team_id: Optional[str] = Field(None, description="Owning team identifier")


class ReferenceData(BaseDataModel):
    """Lookup tables used to label groups and resolve team association.

    All tables are optional; a missing lookup falls back to the raw id, and a
    missing association falls into the unassigned group.

    Attributes:
        projects: Projects keyed by id
        team_names: Team display names keyed by team id
        user_names: User display names keyed by user id
        task_names: Task display names keyed by task id
    """

    projects: Dict[str, Project] = Field(default_factory=dict)
    team_names: Dict[str, str] = Field(default_factory=dict)
    user_names: Dict[str, str] = Field(default_factory=dict)
    task_names: Dict[str, str] = Field(default_factory=dict)

    def project_name(self, project_id: str) -> str:
        project = self.projects.get(project_id)
        return project.name if project else project_id

    def team_id_for(self, project_id: Optional[str]) -> Optional[str]:
        """Return the team owning a project, or None when unknown."""
        if project_id is None:
            return None
        project = self.projects.get(project_id)
        if project is None:
            return None
        return project.team_id
