"""Data models for the aggregation engine.

This package contains:
- BaseDataModel: Base class with common configuration
- TimeEntry, Project, ReferenceData: engine input records
- DateRange: inclusive date range
- GroupDimension, BucketUnit, AveragePolicy: enumerations
- AggregateGroup, GroupSummary: grouping results
"""

from timebill.models.aggregates import AggregateGroup, GroupSummary
from timebill.models.base import BaseDataModel
from timebill.models.date_range import DateRange
from timebill.models.dimensions import AveragePolicy, BucketUnit, GroupDimension
from timebill.models.entry import Project, ReferenceData, TimeEntry

__all__ = [
    "AggregateGroup",
    "AveragePolicy",
    "BaseDataModel",
    "BucketUnit",
    "DateRange",
    "GroupDimension",
    "GroupSummary",
    "Project",
    "ReferenceData",
    "TimeEntry",
]
