"""Data fetching."""

from .fred_fetcher import FredFetcher, build_observations_url, fetch, resolve_api_key

__all__ = ["FredFetcher", "build_observations_url", "fetch", "resolve_api_key"]
