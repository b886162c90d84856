"""Configuration settings for the FRED client."""

from dataclasses import dataclass, field
import os

from dotenv import load_dotenv

from fred_series.exceptions import ConfigurationError


load_dotenv()


API_KEY_ENV = "FRED_API_KEY"
API_KEY_URL = "https://fred.stlouisfed.org/docs/api/api_key.html"
DEFAULT_BASE_URL = "https://api.stlouisfed.org/fred"
DEFAULT_TIMEOUT = 30.0


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


def _env_timeout() -> float | None:
    raw = os.getenv("FRED_TIMEOUT", "").strip()
    if not raw:
        return DEFAULT_TIMEOUT
    if raw.lower() == "none":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            f"FRED_TIMEOUT must be a number of seconds or 'none', got {raw!r}"
        ) from None


@dataclass
class Settings:
    """
    Application settings.

    ``fred_api_key`` is only a fixed key set explicitly by the caller. It is
    never read from the environment here; ``FRED_API_KEY`` is looked up
    on every request instead.
    """

    fred_api_key: str = ""
    base_url: str = field(
        default_factory=lambda: os.getenv("FRED_BASE_URL", DEFAULT_BASE_URL)
    )
    timeout: float | None = field(default_factory=_env_timeout)
    encode_url: bool = field(default_factory=lambda: _env_flag("FRED_ENCODE_URL", True))

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
