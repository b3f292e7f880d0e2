"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import json
from typing import Dict

import pytest

from timebill.config import EngineSettings, reload_config
from timebill.config.logging_config import reset_logging
from timebill.models import Project, ReferenceData, TimeEntry

ENGINE_ENV_VARS = (
    "TIMEZONE",
    "DEFAULT_TAX_RATE",
    "UNASSIGNED_LABEL",
    "COLOR_PALETTE",
    "ENVIRONMENT",
    "DEBUG",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
)


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        "TIMEZONE": "UTC",
        "DEFAULT_TAX_RATE": "0.10",
        "UNASSIGNED_LABEL": "Not set",
        "ENVIRONMENT": "testing",
        "DEBUG": "false",
        "LOG_LEVEL": "WARNING",
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch, tmp_path):
    """Mock environment variables for testing."""
    for key in ENGINE_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)

    # Clear the global config to force reload with test values
    import timebill.config.settings

    timebill.config.settings._config = None

    yield test_env_vars

    # Clean up
    timebill.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> EngineSettings:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Remove handlers installed by configure_logging during a test."""
    yield
    reset_logging()


@pytest.fixture
def now() -> dt.datetime:
    """Reference instant for running entries (Monday 2024-06-17 12:00 UTC)."""
    return dt.datetime(2024, 6, 17, 12, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def sample_reference() -> ReferenceData:
    """Two projects owned by two teams, plus display names."""
    return ReferenceData(
        projects={
            "P1": Project(id="P1", name="Website", team_id="T1"),
            "P2": Project(id="P2", name="Mobile App", team_id="T2"),
        },
        team_names={"T1": "Web Team", "T2": "Mobile Team"},
        user_names={"U1": "Alice", "U2": "Bob"},
    )


@pytest.fixture
def sample_entries():
    """A week of entries across two projects, two users and one unassigned."""
    utc = dt.timezone.utc
    return [
        TimeEntry(
            id="e1",
            user_id="U1",
            project_id="P1",
            start_time=dt.datetime(2024, 6, 10, 9, 0, tzinfo=utc),
            end_time=dt.datetime(2024, 6, 10, 11, 0, tzinfo=utc),
        ),
        TimeEntry(
            id="e2",
            user_id="U2",
            project_id="P2",
            start_time=dt.datetime(2024, 6, 11, 9, 0, tzinfo=utc),
            end_time=dt.datetime(2024, 6, 11, 10, 0, tzinfo=utc),
        ),
        TimeEntry(
            id="e3",
            user_id="U1",
            project_id="P1",
            start_time=dt.datetime(2024, 6, 12, 13, 0, tzinfo=utc),
            end_time=dt.datetime(2024, 6, 12, 14, 30, tzinfo=utc),
            break_minutes=30,
        ),
        TimeEntry(
            id="e4",
            user_id="U2",
            project_id=None,
            start_time=dt.datetime(2024, 6, 13, 8, 0, tzinfo=utc),
            end_time=dt.datetime(2024, 6, 13, 8, 30, tzinfo=utc),
        ),
    ]


@pytest.fixture
def entries_document() -> dict:
    """Exported entries as read by the CLI (naive timestamps, UTC)."""
    return {
        "entries": [
            {"id": "e1", "user_id": "U1", "project_id": "P1", "task_id": "K1",
             "start_time": "2024-06-10T09:00:00", "end_time": "2024-06-10T11:00:00"},
            {"id": "e2", "user_id": "U2", "project_id": "P2",
             "start_time": "2024-06-11T09:00:00", "end_time": "2024-06-11T10:00:00"},
            {"id": "e3", "user_id": "U1", "project_id": "P1", "task_id": "K2",
             "start_time": "2024-06-12T13:00:00", "end_time": "2024-06-12T14:30:00",
             "break_minutes": 30},
            {"id": "e4", "user_id": "U2", "project_id": None,
             "start_time": "2024-06-13T08:00:00", "end_time": "2024-06-13T08:30:00"},
            {"id": "e5", "user_id": "U1", "project_id": "P2", "task_id": "K1",
             "start_time": "2024-06-04T09:00:00", "end_time": "2024-06-04T10:00:00"},
            {"id": "e6", "user_id": "U1", "project_id": "P1", "task_id": "K1",
             "start_time": "2024-06-17T11:00:00", "end_time": None},
        ],
        "projects": [
            {"id": "P1", "name": "Website", "team_id": "T1"},
            {"id": "P2", "name": "Mobile App", "team_id": "T2"},
        ],
        "team_names": {"T1": "Web Team", "T2": "Mobile Team"},
        "user_names": {"U1": "Alice", "U2": "Bob"},
        "task_names": {"K1": "Design", "K2": "Review"},
    }


@pytest.fixture
def entries_file(tmp_path, entries_document) -> str:
    """Entries document written to a temporary JSON file."""
    path = tmp_path / "entries.json"
    path.write_text(json.dumps(entries_document))
    return str(path)


@pytest.fixture
def rates_file(tmp_path) -> str:
    """Hourly rates for every project group, including the unassigned one."""
    path = tmp_path / "rates.json"
    path.write_text(json.dumps({"P1": 3000, "P2": 2000, "unassigned": 0}))
    return str(path)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
