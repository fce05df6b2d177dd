"""Exception hierarchy for the migration pipeline."""

from typing import Any, Dict, List, Optional


class MigrationError(Exception):
    """Base class for all migration errors."""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": type(self).__name__, "message": str(self)}


class ConfigError(MigrationError):
    """Required configuration is missing or malformed."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid configuration: " + "; ".join(self.errors))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class HttpError(MigrationError):
    """A non-2xx response or a transport failure from either API."""

    def __init__(self, status_code: int, message: str, url: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.url = url
        super().__init__(f"API Error ({status_code}): {message}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"status_code": self.status_code, "url": self.url})
        return data


class ResponseFormatError(MigrationError):
    """The source response did not contain a record list."""


class MappingError(MigrationError):
    """A source record could not be mapped to the destination schema."""


class BatchWriteError(MigrationError):
    """A destination batch write failed and aborted the run."""

    def __init__(self, batch_index: int, records_committed: int, cause: MigrationError):
        self.batch_index = batch_index
        self.records_committed = records_committed
        self.cause = cause
        super().__init__(f"Batch {batch_index + 1} failed: {cause}")

    @property
    def batch_number(self) -> int:
        """1-based batch number, as reported in the logs."""
        return self.batch_index + 1

    @property
    def status_code(self) -> Optional[int]:
        return getattr(self.cause, "status_code", None)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "batch_number": self.batch_number,
            "records_committed": self.records_committed,
            "status_code": self.status_code,
        })
        return data
