"""
Pytest configuration and shared fixtures.
"""
import pytest
import respx
from httpx import Response


OBSERVATIONS_URL = "https://api.stlouisfed.org/fred/series/observations"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """
    Clean environment for testing.

    Removes FRED-related env vars so a local .env never leaks into tests.
    """
    for var in ["FRED_API_KEY", "FRED_BASE_URL", "FRED_TIMEOUT", "FRED_ENCODE_URL"]:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def observations_payload():
    """Payload shaped like a real series/observations response."""
    return {
        "realtime_start": "2024-01-01",
        "realtime_end": "2024-01-01",
        "file_type": "json",
        "count": 3,
        "observations": [
            {
                "realtime_start": "2024-01-01",
                "realtime_end": "2024-01-01",
                "date": "2020-01-01",
                "value": "1234.5",
            },
            {
                "realtime_start": "2024-01-01",
                "realtime_end": "2024-01-01",
                "date": "2020-04-01",
                "value": ".",
            },
            {
                "realtime_start": "2024-01-01",
                "realtime_end": "2024-01-01",
                "date": "2020-07-01",
                "value": "-3",
            },
        ],
    }


@pytest.fixture
def fred_api(observations_payload):
    """Mocked observations endpoint answering with ``observations_payload``."""
    with respx.mock(assert_all_called=False) as mock:
        route = mock.get(OBSERVATIONS_URL).mock(
            return_value=Response(200, json=observations_payload)
        )
        yield route
