"""Nested operation reports.

An operation report breaks recorded time down hierarchically:

    project -> user -> task -> local date

Every level carries its total in seconds and as ``HH:MM:SS``. Projects,
users and tasks keep the order in which they are first encountered; dates
within a task are chronological. Entries without a project, user or task
fall into the ``unassigned`` node at that level, so the report total always
equals the sum of all normalized durations.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from timebill.aggregators.grouping import GroupKey, group_key
from timebill.calculators.time_utils import (
    duration_seconds,
    format_duration,
    local_date,
)
from timebill.models.aggregates import DEFAULT_UNASSIGNED_LABEL, UNASSIGNED_GROUP_ID
from timebill.models.dimensions import GroupDimension
from timebill.models.entry import ReferenceData, TimeEntry

logger = logging.getLogger(__name__)


@dataclass
class DailyTime:
    """Time recorded on one local date for one task."""

    date: dt.date
    total_seconds: int = 0

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total_seconds": self.total_seconds,
            "time": format_duration(self.total_seconds),
        }


@dataclass
class TaskTime:
    """Time one user spent on one task within a project."""

    id: str
    label: str
    total_seconds: int = 0
    days: List[DailyTime] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "total_seconds": self.total_seconds,
            "time": format_duration(self.total_seconds),
            "days": [d.to_dict() for d in self.days],
        }


@dataclass
class UserTime:
    """Time one user spent on a project, broken down by task."""

    id: str
    label: str
    total_seconds: int = 0
    tasks: List[TaskTime] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "total_seconds": self.total_seconds,
            "time": format_duration(self.total_seconds),
            "tasks": [t.to_dict() for t in self.tasks],
        }


@dataclass
class ProjectTime:
    """Time recorded on one project, broken down by user."""

    id: str
    label: str
    total_seconds: int = 0
    users: List[UserTime] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "total_seconds": self.total_seconds,
            "time": format_duration(self.total_seconds),
            "users": [u.to_dict() for u in self.users],
        }


@dataclass
class OperationReport:
    """Project -> user -> task -> date breakdown with a grand total.

    Example:
        >>> report = build_operation_report([], now=dt.datetime(2024, 6, 17))
        >>> report.to_dict()
        {'total_seconds': 0, 'time': '00:00:00', 'projects': []}
    """

    projects: List[ProjectTime] = field(default_factory=list)
    total_seconds: int = 0

    def to_dict(self) -> dict:
        return {
            "total_seconds": self.total_seconds,
            "time": format_duration(self.total_seconds),
            "projects": [p.to_dict() for p in self.projects],
        }


def _task_key(
    entry: TimeEntry, reference: ReferenceData, unassigned_label: str
) -> GroupKey:
    if entry.task_id is None:
        return UNASSIGNED_GROUP_ID, unassigned_label
    return entry.task_id, reference.task_names.get(entry.task_id, entry.task_id)


def build_operation_report(
    entries: Sequence[TimeEntry],
    now: dt.datetime,
    reference: Optional[ReferenceData] = None,
    tz: Optional[dt.tzinfo] = None,
    unassigned_label: str = DEFAULT_UNASSIGNED_LABEL,
    clamp_negative: bool = False,
) -> OperationReport:
    """Build a nested project/user/task/date report.

    Args:
        entries: Time entries (not modified)
        now: Reference instant for running entries
        reference: Lookup tables for project, user and task labels
        tz: Reporting timezone for the per-date breakdown
        unassigned_label: Label of the sentinel nodes
        clamp_negative: Clamp negative durations to 0 instead of raising

    Returns:
        OperationReport whose totals add up at every level

    Raises:
        InvalidRangeError: If an entry has a negative duration
    """
    reference = reference or ReferenceData()
    logger.info(f"Building operation report from {len(entries)} entries")

    projects: Dict[str, ProjectTime] = {}
    users: Dict[tuple, UserTime] = {}
    tasks: Dict[tuple, TaskTime] = {}
    days: Dict[tuple, DailyTime] = {}

    for entry in entries:
        seconds = duration_seconds(entry, now, clamp_negative=clamp_negative)
        project_id, project_label = group_key(
            entry, GroupDimension.PROJECT, reference, tz, unassigned_label
        )
        user_id, user_label = group_key(
            entry, GroupDimension.USER, reference, tz, unassigned_label
        )
        task_id, task_label = _task_key(entry, reference, unassigned_label)
        day = local_date(entry.start_time, tz)

        project = projects.get(project_id)
        if project is None:
            project = projects[project_id] = ProjectTime(project_id, project_label)

        user_path = (project_id, user_id)
        user = users.get(user_path)
        if user is None:
            user = users[user_path] = UserTime(user_id, user_label)
            project.users.append(user)

        task_path = user_path + (task_id,)
        task = tasks.get(task_path)
        if task is None:
            task = tasks[task_path] = TaskTime(task_id, task_label)
            user.tasks.append(task)

        day_path = task_path + (day,)
        daily = days.get(day_path)
        if daily is None:
            daily = days[day_path] = DailyTime(day)
            task.days.append(daily)

        daily.total_seconds += seconds
        task.total_seconds += seconds
        user.total_seconds += seconds
        project.total_seconds += seconds

    for task in tasks.values():
        task.days.sort(key=lambda d: d.date)

    report = OperationReport(
        projects=list(projects.values()),
        total_seconds=sum(p.total_seconds for p in projects.values()),
    )

    logger.info(
        f"Built operation report with {len(report.projects)} projects, "
        f"total {format_duration(report.total_seconds)}"
    )
    return report
