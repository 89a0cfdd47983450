"""Error taxonomy for the export pipeline and user-facing formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from postman_exporter.types import ExportReport

NETWORK_ERROR_MESSAGE = "Network error: Unable to connect to Postman API"


class PostmanExportError(Exception):
    """Base error for everything raised by the exporter."""


class MissingArgumentError(PostmanExportError):
    """Raised when a required input (workspace, API key) is absent."""


class RemoteError(PostmanExportError):
    """Raised when the Postman API answers with a non-success status."""

    def __init__(
        self, message: str, status: int, response_body: Any = None
    ) -> None:
        super().__init__(message)
        self.status = status
        self.response_body = response_body


class InvalidCredentialError(RemoteError):
    """The API key was rejected (HTTP 401)."""


class WorkspaceNotFoundError(RemoteError):
    """The workspace does not exist or is not visible (HTTP 404)."""

    def __init__(self, handle: str, status: int = 404, response_body: Any = None):
        super().__init__(f"Workspace not found: {handle}", status, response_body)
        self.handle = handle


class NetworkError(PostmanExportError):
    """The API could not be reached at all (DNS, refused connection, timeout)."""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE) -> None:
        super().__init__(message)


class MalformedResponseError(PostmanExportError):
    """A success response did not have the expected shape."""


class EmptyInventoryError(PostmanExportError):
    """The workspace has no collections to export."""

    EMPTY = "empty"
    MISSING = "missing"

    def __init__(self, handle: str, reason: str = EMPTY) -> None:
        if reason == self.MISSING:
            message = f"No collections found in workspace {handle} (response has no collections list)"
        else:
            message = f"No collections found in workspace {handle}"
        super().__init__(message)
        self.handle = handle
        self.reason = reason


class NoMatchError(PostmanExportError):
    """No collection matched the requested ids or names."""

    def __init__(self, message: str = "No collections match the specified filters"):
        super().__init__(message)


class CollectionFetchError(PostmanExportError):
    """The collection body was missing its ``collection`` envelope."""

    def __init__(self, collection_uid: str) -> None:
        super().__init__(f"Failed to get collection {collection_uid}")
        self.collection_uid = collection_uid


class ConverterError(PostmanExportError):
    """The converter could not turn a collection into an OpenAPI document."""


class ConversionError(PostmanExportError):
    """Wraps any failure that happened while converting one collection."""

    def __init__(self, collection_uid: str, cause: BaseException) -> None:
        super().__init__(f"Failed to export collection: {cause}")
        self.collection_uid = collection_uid
        self.cause = cause


class BatchPartialFailureError(PostmanExportError):
    """At least one collection of the batch failed to export."""

    def __init__(self, report: ExportReport) -> None:
        super().__init__(
            f"Some collections failed to export "
            f"({report.failed} of {report.total} failed)"
        )
        self.report = report


def _format_remote_error(error: RemoteError) -> str:
    if isinstance(error, InvalidCredentialError):
        return f"{error}. Check the Postman API key."
    return f"Postman API error (HTTP {error.status}): {error}"


ERROR_TYPES = {
    InvalidCredentialError: _format_remote_error,
    WorkspaceNotFoundError: lambda e: str(e),
    RemoteError: _format_remote_error,
    PostmanExportError: lambda e: str(e),
    PermissionError: lambda e: f"Permission denied: {e!s}. Check file permissions.",
    OSError: lambda e: f"System error: {e!s}",
}


def get_error_human_message(error: Exception) -> str:
    """
    Get user-friendly error message based on exception type.

    Args:
        error: The exception to format

    Returns:
        Formatted error message suitable for end users
    """
    for error_type, handler in ERROR_TYPES.items():
        if isinstance(error, error_type):
            return handler(error)
    return str(error)
