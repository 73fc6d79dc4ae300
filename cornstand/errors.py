from __future__ import annotations


class CornStandError(Exception):
    pass


class InvalidClientId(CornStandError, ValueError):
    def __init__(self, message: str = "clientId is required") -> None:
        super().__init__(message)


class StoreUnavailable(CornStandError):
    """A store call failed or timed out; its outcome is unknown."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"store operation '{operation}' failed")


class ConfigurationError(CornStandError):
    pass
