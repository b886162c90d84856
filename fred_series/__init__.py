"""Fetch FRED time series observations as pandas DataFrames."""

from fred_series.data import FredFetcher, build_observations_url, fetch, resolve_api_key
from fred_series.exceptions import (
    ConfigurationError,
    FormatError,
    FredError,
    ProtocolError,
    RemoteError,
)

__all__ = [
    "fetch",
    "build_observations_url",
    "resolve_api_key",
    "FredFetcher",
    "FredError",
    "ConfigurationError",
    "ProtocolError",
    "RemoteError",
    "FormatError",
]
