"""FRED series observations fetcher."""

import json
import logging
import os
import re
from typing import Callable

import httpx
import pandas as pd

from fred_series.config import (
    API_KEY_ENV,
    API_KEY_URL,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    Settings,
)
from fred_series.exceptions import (
    ConfigurationError,
    FormatError,
    FredError,
    ProtocolError,
    RemoteError,
)


logger = logging.getLogger(__name__)

KeyLookup = Callable[[str], "str | None"]

JSON_MEDIA_TYPE = "application/json"
DATE_FORMAT = "%Y-%m-%d"


def resolve_api_key(api_key: str | None = None, lookup: KeyLookup | None = None) -> str:
    """
    Resolve the FRED API key for a single request.

    An explicit, non-empty ``api_key`` always wins. Otherwise ``lookup`` is
    asked for ``FRED_API_KEY`` (the process environment by default).

    Raises:
        ConfigurationError: if neither source yields a non-empty key
    """
    if api_key:
        return api_key

    lookup = lookup or os.environ.get
    api_key = lookup(API_KEY_ENV)
    if not api_key:
        raise ConfigurationError(
            "API key not provided. Supply it as `api_key` argument or set the "
            f"`{API_KEY_ENV}` environment variable. API key can be obtained "
            f"from {API_KEY_URL}"
        )
    return api_key


def build_observations_url(
    series_id: str,
    api_key: str,
    *,
    encode: bool = True,
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    """
    Build the series/observations request URL.

    With ``encode=False`` the values are interpolated verbatim, so ids or keys
    containing ``&``, ``=`` or ``#`` will corrupt the query string.
    """
    endpoint = f"{base_url.rstrip('/')}/series/observations"
    if not encode:
        return f"{endpoint}?series_id={series_id}&api_key={api_key}&file_type=json"

    query = httpx.QueryParams(
        {"series_id": series_id, "api_key": api_key, "file_type": "json"}
    )
    return f"{endpoint}?{query}"


def _mask_api_key(url: str) -> str:
    return re.sub(r"(api_key=)[^&]*", r"\1***", url)


def _media_type(response: httpx.Response) -> str:
    content_type = response.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower()


def _parse_payload(response: httpx.Response) -> dict:
    """Gate on content type, decode JSON and surface FRED error envelopes."""
    if _media_type(response) != JSON_MEDIA_TYPE:
        raise ProtocolError(
            "FRED API did not return JSON. Check your API key and series_id."
        )

    try:
        payload = json.loads(response.content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(f"FRED API returned malformed JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ProtocolError("FRED API returned JSON that is not an object")

    if payload.get("error_code") is not None:
        raise RemoteError(
            payload.get("error_message") or "", error_code=payload["error_code"]
        )

    return payload


def _empty_table(numeric: bool) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": pd.Series(dtype="datetime64[ns]"),
            "value": pd.Series(dtype="float64" if numeric else "object"),
        }
    )


def _to_table(observations: list[dict], numeric: bool) -> pd.DataFrame:
    """
    Shape raw observation rows into a DataFrame.

    Dates are parsed strictly; values are coerced leniently so FRED's "."
    placeholder for missing data becomes NaN.
    """
    if not isinstance(observations, list) or not all(
        isinstance(row, dict) for row in observations
    ):
        raise ProtocolError(
            "FRED API returned observations that are not a list of objects"
        )

    df = pd.DataFrame(observations)

    if "date" not in df.columns or df["date"].isna().any():
        raise FormatError("Observation without a date field")

    try:
        df["date"] = pd.to_datetime(df["date"], format=DATE_FORMAT)
    except (ValueError, TypeError) as e:
        raise FormatError(f"Unparseable observation date: {e}") from e

    if numeric and "value" in df.columns:
        df["value"] = pd.to_numeric(df["value"], errors="coerce")

    return df


def fetch(
    series_id: str,
    api_key: str | None = None,
    numeric: bool = True,
    *,
    lookup: KeyLookup | None = None,
    client: httpx.Client | None = None,
    timeout: float | None = DEFAULT_TIMEOUT,
    encode: bool = True,
    base_url: str = DEFAULT_BASE_URL,
) -> pd.DataFrame:
    """
    Fetch all observations of a FRED series.

    Args:
        series_id: FRED series ID (e.g. "ATNHPIUS16180Q")
        api_key: FRED API key; falls back to ``lookup("FRED_API_KEY")``
        numeric: If True, convert the value column to float (missing -> NaN)
        lookup: Named-value lookup used when no key is given (default: os.environ.get)
        client: Optional httpx client to send the request with
        timeout: Request timeout in seconds, None to wait indefinitely
        encode: Percent-encode series_id and api_key in the query string
        base_url: FRED API root

    Returns:
        DataFrame with one row per observation in API order, a datetime
        ``date`` column, ``value`` and any other fields FRED returned
    """
    api_key = resolve_api_key(api_key, lookup)
    url = build_observations_url(series_id, api_key, encode=encode, base_url=base_url)

    logger.info(f"Fetching {series_id}...")
    logger.debug(f"  GET {_mask_api_key(url)}")

    if client is None:
        response = httpx.get(url, timeout=timeout)
    else:
        response = client.get(url, timeout=timeout)

    payload = _parse_payload(response)

    observations = payload.get("observations") or []
    if not observations:
        logger.warning(f"  No observations returned for {series_id}")
        return _empty_table(numeric)

    df = _to_table(observations, numeric)
    logger.info(f"  Parsed {len(df)} observations")
    return df


class FredFetcher:
    """Fetches series observations from FRED with a reusable HTTP client."""

    def __init__(
        self,
        settings: Settings | None = None,
        lookup: KeyLookup | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.lookup = lookup
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.settings.timeout)
            self._owns_client = True
        return self._client

    def close(self) -> None:
        """Close HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "FredFetcher":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def fetch_observations(
        self, series_id: str, api_key: str | None = None, numeric: bool = True
    ) -> pd.DataFrame:
        """
        Fetch a series.

        The key comes from ``api_key``, else an explicitly configured
        ``settings.fred_api_key``, else a fresh ``lookup("FRED_API_KEY")``.
        """
        return fetch(
            series_id,
            api_key or self.settings.fred_api_key,
            numeric,
            lookup=self.lookup,
            client=self.client,
            timeout=self.settings.timeout,
            encode=self.settings.encode_url,
            base_url=self.settings.base_url,
        )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for fetching a series."""
    import argparse
    import sys

    parser = argparse.ArgumentParser(description="Fetch FRED series observations")
    parser.add_argument("series_id", help="FRED series ID, e.g. ATNHPIUS16180Q")
    parser.add_argument(
        "--api-key",
        type=str,
        help=f"FRED API key (default: ${API_KEY_ENV})",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Keep values as strings instead of converting to numbers",
    )
    parser.add_argument(
        "--csv",
        type=str,
        metavar="PATH",
        help="Write observations to a CSV file instead of printing them",
    )
    parser.add_argument(
        "--no-encode",
        action="store_true",
        help="Do not percent-encode series id and key in the request URL",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        settings = Settings()
        if args.timeout is not None:
            settings.timeout = args.timeout
        if args.no_encode:
            settings.encode_url = False

        with FredFetcher(settings) as fetcher:
            df = fetcher.fetch_observations(
                args.series_id, api_key=args.api_key, numeric=not args.raw
            )
    except FredError as e:
        print(f"{type(e).__name__}: {e}")
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"HTTP error: {e}")
        sys.exit(1)

    if args.csv:
        df.to_csv(args.csv, index=False)
        print(f"Wrote {len(df)} observations to {args.csv}")
    else:
        print(df.to_string(index=False))


if __name__ == "__main__":
    main()
