"""Pytest configuration for local package imports and shared fakes.

This prepends the repository `src` directory to sys.path so tests can import
the `aqs` package without installing it into the environment.
"""

import sys
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from aqs import _client  # noqa: E402
from aqs.models import QueryResult, UserCredential  # noqa: E402


@pytest.fixture
def user():
    return UserCredential(email="test@example.com", key="secretkey")


@pytest.fixture
def dispatched(monkeypatch):
    """Replace the client dispatcher and record what it was asked to send."""
    calls = []

    def fake_aqs_get(service, endpoint, user, variables, **options):
        calls.append(
            {
                "service": service,
                "endpoint": endpoint,
                "user": user,
                "variables": dict(variables),
                "options": options,
            }
        )
        return QueryResult(data=pd.DataFrame([{"sample_measurement": 0.031}]), header={"status": "Success"})

    monkeypatch.setattr(_client, "aqs_get", fake_aqs_get)
    return calls
