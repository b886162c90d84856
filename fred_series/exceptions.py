"""Errors raised while fetching FRED observations."""


class FredError(Exception):
    """Base class for all fetch failures."""


class ConfigurationError(FredError, ValueError):
    """No API key could be resolved."""


class ProtocolError(FredError):
    """The service answered, but not with a JSON observation payload."""


class RemoteError(FredError):
    """FRED reported an error_code in its JSON payload."""

    def __init__(self, error_message: str, error_code: int | str | None = None) -> None:
        super().__init__(error_message)
        self.error_message = error_message
        self.error_code = error_code


class FormatError(FredError, ValueError):
    """An observation date could not be parsed."""
