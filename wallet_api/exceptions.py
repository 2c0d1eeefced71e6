class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or malformed."""


class XamanAPIError(RuntimeError):
    """Non-2xx response from the Xaman platform API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
