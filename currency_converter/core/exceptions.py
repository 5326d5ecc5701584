class ConverterError(Exception):
    """Base class for every error the rate core can raise."""


class ConfigError(ConverterError):
    """A required setting (the API key) is missing."""

    def __init__(self, setting: str) -> None:
        self.setting = setting
        super().__init__(f"Missing required setting '{setting}'")


class RateLimitError(ConverterError):
    """Remote service refused the request: request limit exceeded."""

    def __init__(self, base: str) -> None:
        self.base = (base or "").upper()
        super().__init__(f"API request limit exceeded (base={self.base})")


class RemoteError(ConverterError):
    """Non-success HTTP status or a malformed response body."""

    def __init__(self, detail: str, status: int | None = None) -> None:
        self.status = status
        self.detail = detail
        prefix = f"HTTP {status}: " if status is not None else ""
        super().__init__(f"Error fetching exchange rates: {prefix}{detail}")


class NetworkError(ConverterError):
    """No response received (DNS, timeout, connection reset)."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Network error: {reason}")


class RateNotFoundError(ConverterError):
    """Target currency is absent from an otherwise successful rate table."""

    def __init__(self, base: str, target: str) -> None:
        self.base = (base or "").upper()
        self.target = (target or "").upper()
        super().__init__(f"Rate {self.base}→{self.target} not found in response")


class PersistenceError(ConverterError):
    """Cache file could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save cache to {path}: {reason}")
