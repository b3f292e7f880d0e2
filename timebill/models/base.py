"""Base model for all input models of the aggregation engine.

This module provides a base Pydantic model with the configuration shared by
time entries, project references and date ranges.
"""

from pydantic import BaseModel, ConfigDict


class BaseDataModel(BaseModel):
    """Base class for all input models.

    Provides common configuration for:
    - Validation with type checking
    - Serialization to/from dictionaries
    - Immutability (frozen models), so the engine cannot mutate caller input
    - Arbitrary types support for dates, datetimes, decimals

    Example:
        >>> class Team(BaseDataModel):
        ...     id: str
        ...     name: str
        >>> team = Team(id="t1", name="Platform")
        >>> team.model_dump()
        {'id': 't1', 'name': 'Platform'}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date, datetime
        arbitrary_types_allowed=True,
        # Use lax type checking so ISO strings from JSON are accepted
        strict=False,
        # Reject unknown fields
        extra="forbid",
        # Input records are read-only once constructed
        frozen=True,
    )
