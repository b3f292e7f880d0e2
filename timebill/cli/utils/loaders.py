"""JSON input loading for CLI commands.

The engine itself never touches files; these helpers turn the JSON exported
by the persistence layer into engine input models.

Entries file format: either a list of entry objects, or an object with an
``entries`` list and optional ``projects`` (list of project objects),
``team_names``, ``user_names`` and ``task_names`` maps. Naive timestamps are
interpreted in the reporting timezone.
"""

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from timebill.calculators.billing_calculator import rates_from_mapping
from timebill.cli.error_handlers import InputFileError
from timebill.models.entry import Project, ReferenceData, TimeEntry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_json(path: PathLike) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _localize(raw: Dict[str, Any], tz: dt.tzinfo) -> TimeEntry:
    entry = TimeEntry.model_validate(raw)
    updates = {}
    if entry.start_time.tzinfo is None:
        updates["start_time"] = entry.start_time.replace(tzinfo=tz)
    if entry.end_time is not None and entry.end_time.tzinfo is None:
        updates["end_time"] = entry.end_time.replace(tzinfo=tz)
    if updates:
        # Round-trip through validation so the awareness check runs again
        entry = TimeEntry.model_validate({**entry.model_dump(), **updates})
    return entry


def load_entries(
    path: PathLike, tz: dt.tzinfo
) -> Tuple[List[TimeEntry], ReferenceData]:
    """Load time entries and reference data from a JSON file.

    Args:
        path: Path to the entries file
        tz: Timezone applied to naive timestamps

    Returns:
        Tuple of (entries, reference data)

    Raises:
        InputFileError: If the document has an unexpected shape
        pydantic.ValidationError: If an entry or project is malformed
    """
    document = _read_json(path)

    if isinstance(document, list):
        raw_entries, document = document, {}
    elif isinstance(document, dict):
        raw_entries = document.get("entries", [])
    else:
        raise InputFileError(
            f"{path}: expected a JSON list or object",
            "Export entries as a list, or as an object with an \"entries\" list",
        )

    entries = [_localize(raw, tz) for raw in raw_entries]
    projects = [Project.model_validate(p) for p in document.get("projects", [])]
    reference = ReferenceData(
        projects={p.id: p for p in projects},
        team_names=document.get("team_names", {}),
        user_names=document.get("user_names", {}),
        task_names=document.get("task_names", {}),
    )

    logger.info(
        f"Loaded {len(entries)} entries and {len(projects)} projects from {path}"
    )
    return entries, reference


def load_rates(path: PathLike) -> Dict[str, Any]:
    """Load an hourly rate table ``{group_id: rate}`` from a JSON file.

    Raises:
        InputFileError: If the document is not an object
        ValueError: If a rate is not numeric
    """
    document = _read_json(path)
    if not isinstance(document, dict):
        raise InputFileError(
            f"{path}: expected a JSON object of group id to rate",
            'Use the form {"P1": 3000, "P2": 2500}',
        )
    rates = rates_from_mapping(document)
    logger.info(f"Loaded {len(rates)} rates from {path}")
    return rates
