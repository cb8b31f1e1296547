"""
Sheetbase - Custom Exceptions.

Centralized exception handling with standardized error responses.
"""

from typing import Any
from uuid import UUID


class SheetbaseException(Exception):
    """Base exception for Sheetbase application."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        request_id: UUID | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.request_id = request_id
        super().__init__(message)


class ValidationException(SheetbaseException):
    """Raised for validation errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details={"errors": errors} if errors else None,
        )


class NotFoundException(SheetbaseException):
    """Raised when a resource is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource_type} not found: {resource_id}",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class ConflictException(SheetbaseException):
    """Raised when a write would duplicate an existing key."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="CONFLICT",
            message=message,
            status_code=409,
            details=details,
        )


class FeatureDisabledException(SheetbaseException):
    """Raised when a feature flag is disabled."""

    def __init__(self, feature_name: str):
        super().__init__(
            code="FEATURE_DISABLED",
            message=f"Feature '{feature_name}' is currently disabled",
            status_code=503,
            details={"feature": feature_name},
        )


# =============================================================================
# Datastore
# =============================================================================


class SchemaUnavailableException(SheetbaseException):
    """Raised when a table has no header row.

    Not retryable: the table has to be initialized before anything can be
    written to it.
    """

    def __init__(self, table: str):
        super().__init__(
            code="SCHEMA_UNAVAILABLE",
            message=f"Table '{table}' has no header row; initialize it before writing.",
            status_code=409,
            details={"table": table},
        )


class DatastoreUnavailableException(SheetbaseException):
    """Raised when the remote store cannot be reached or refuses the call.

    Callers may retry the whole operation.
    """

    def __init__(
        self,
        table: str | None,
        operation: str,
        reason: str,
        upstream_status: int | None = None,
    ):
        if operation == "read":
            message = "Data temporarily unavailable, retry."
        else:
            message = "Change not saved, retry."
        details: dict[str, Any] = {"table": table, "operation": operation, "reason": reason}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(
            code="DATASTORE_UNAVAILABLE",
            message=message,
            status_code=503,
            details=details,
        )
        self.table = table
        self.operation = operation


class AmbiguousMutationOutcomeException(SheetbaseException):
    """Raised when a mutation was abandoned before its result was observed.

    The remote change may or may not have been applied; re-read the table
    before deciding what to do next.
    """

    def __init__(self, table: str, operation: str, reason: str):
        super().__init__(
            code="AMBIGUOUS_MUTATION_OUTCOME",
            message=f"Outcome of {operation} on '{table}' is unknown; re-read the table before retrying.",
            status_code=504,
            details={"table": table, "operation": operation, "reason": reason},
        )
        self.table = table
        self.operation = operation


class CredentialMissingException(SheetbaseException):
    """Raised when no bearer credential is available for the remote store."""

    def __init__(self, message: str = "No access token configured for the spreadsheet"):
        super().__init__(
            code="CREDENTIAL_MISSING",
            message=message,
            status_code=401,
        )


class TableNotFoundException(SheetbaseException):
    """Raised when the named table does not exist in the spreadsheet."""

    def __init__(self, table: str):
        super().__init__(
            code="TABLE_NOT_FOUND",
            message=f"Table '{table}' does not exist",
            status_code=404,
            details={"table": table},
        )


class InvalidRowPositionException(SheetbaseException):
    """Raised when a mutation targets the header row or a non-positive row."""

    def __init__(self, table: str, position: int):
        super().__init__(
            code="INVALID_ROW_POSITION",
            message=f"Row position {position} is not a data row (data rows start at 2)",
            status_code=400,
            details={"table": table, "position": position},
        )


class RecordNotFoundException(SheetbaseException):
    """Raised when a keyed lookup matches no row."""

    def __init__(self, table: str, key_column: str, key: str):
        super().__init__(
            code="RECORD_NOT_FOUND",
            message=f"{table} not found: {key_column}={key}",
            status_code=404,
            details={"table": table, "key_column": key_column, "key": key},
        )
