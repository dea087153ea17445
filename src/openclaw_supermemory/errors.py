"""Exception hierarchy for the Supermemory plugin."""


class SupermemoryError(Exception):
    """Base class for all plugin errors."""


class ConfigError(SupermemoryError):
    """Invalid plugin configuration."""


class ValidationError(SupermemoryError):
    """Malformed input rejected before reaching the backend."""


class GatewayError(SupermemoryError):
    """The memory backend could not be reached or rejected a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WipeError(SupermemoryError):
    """A bulk wipe stopped part way through.

    Attributes:
        deleted_count: Documents deleted by batches that completed.
        total: Documents found while listing the container.
    """

    def __init__(self, message: str, deleted_count: int, total: int) -> None:
        super().__init__(message)
        self.deleted_count = deleted_count
        self.total = total
