"""
Errors raised by the user store, the user service and the HTTP layer.

Every ``LibraryAppError`` knows its HTTP status and its envelope type, so the
Flask app needs one handler for the whole hierarchy. Database outages and
werkzeug routing errors get their own handlers; anything else is a 500.

Error bodies always look like::

    {"error": {"type", "message", "timestamp", "status_code",
               "details"?, "request_id"?, "help"}}
"""

import itertools
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple, Union

from flask import Flask, has_request_context, request
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)

_error_ids = itertools.count(1)

HELP_TEXT = {
    "validation_error": (
        "Send a JSON object with a non-empty string 'name'; 'age' and 'id' "
        "must be integers."
    ),
    "not_found": "List users with GET /user and retry with an existing user.",
    "method_not_allowed": "Use one of the allowed methods for this endpoint.",
    "service_unavailable": "The database is unreachable. Retry in a moment.",
    "server_error": "The request failed on the server. Retry later.",
}


class LibraryAppError(Exception):
    """Base class for user management errors."""

    error_type = "server_error"

    def __init__(
        self, message: str, status_code: int = 500, details: Optional[Dict] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    @property
    def public_message(self) -> str:
        """Message safe to return to an HTTP client."""
        return self.message


class ValidationError(LibraryAppError):
    """Invalid user input: empty name, wrong types, malformed body."""

    error_type = "validation_error"

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, 400, details)


class NotFoundError(LibraryAppError):
    """No user matches the id or name of an update or delete."""

    error_type = "not_found"

    def __init__(
        self,
        resource_type: str,
        resource_id: Union[str, int],
        details: Optional[Dict] = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            404,
            {
                "resource_type": resource_type,
                "resource_id": resource_id,
                **(details or {}),
            },
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DatabaseError(LibraryAppError):
    """A store write failed; wraps the SQLAlchemy exception."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, 500)
        self.original_error = original_error

    @property
    def public_message(self) -> str:
        # Driver messages can carry SQL and connection details
        return "A database error occurred. Please try again later."


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    details: Optional[Dict] = None,
    request_id: Optional[str] = None,
) -> Tuple[Dict, int]:
    """
    Build the JSON error envelope.

    Args:
        error_type: Envelope type, a key of HELP_TEXT
        message: Human-readable error message
        status_code: HTTP status code
        details: Extra fields, omitted when empty
        request_id: Error id from log_error, omitted when empty

    Returns:
        Tuple of (response_dict, status_code)
    """
    error = {
        "type": error_type,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status_code": status_code,
    }
    if details:
        error["details"] = details
    if request_id:
        error["request_id"] = request_id
    error["help"] = HELP_TEXT.get(error_type, HELP_TEXT["server_error"])

    return {"error": error}, status_code


def log_error(error: Exception, request_info: Optional[Dict] = None) -> str:
    """
    Log an error with its traceback and return an id to quote in the response.

    Args:
        error: The exception that occurred
        request_info: Method and path of the failing request, if any

    Returns:
        Error id of the form ERR_<utc timestamp>_<n>
    """
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    error_id = f"ERR_{stamp}_{next(_error_ids)}"

    where = ""
    if request_info:
        where = f" during {request_info['method']} {request_info['path']}"

    logger.error(
        f"{error_id}: {type(error).__name__}{where}: {error}",
        exc_info=(type(error), error, error.__traceback__),
    )
    return error_id


def _current_request() -> Dict:
    if not has_request_context():
        return {}
    return {"method": request.method, "path": request.path}


def _respond(
    error: Exception,
    error_type: str,
    message: str,
    status_code: int,
    details: Optional[Dict] = None,
):
    error_id = log_error(error, _current_request())
    return create_error_response(error_type, message, status_code, details, error_id)


def register_error_handlers(app: Flask) -> None:
    """
    Map exceptions raised by the user routes to JSON error envelopes.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(LibraryAppError)
    def handle_library_error(error: LibraryAppError):
        return _respond(
            error,
            error.error_type,
            error.public_message,
            error.status_code,
            error.details,
        )

    # Reads are not wrapped by the store, so a lost connection lands here
    @app.errorhandler(OperationalError)
    def handle_database_unavailable(error: OperationalError):
        return _respond(
            error,
            "service_unavailable",
            "Database service temporarily unavailable. Please try again later.",
            503,
        )

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        if error.code == 404:
            return _respond(
                error, "not_found", f"Endpoint {request.path} not found", 404
            )
        if error.code == 405:
            return _respond(
                error,
                "method_not_allowed",
                f"Method {request.method} not allowed on {request.path}",
                405,
                {"allowed_methods": sorted(error.valid_methods or [])},
            )

        error_type = "validation_error" if error.code < 500 else "server_error"
        return _respond(error, error_type, error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        return _respond(
            error,
            "server_error",
            "An unexpected error occurred. Please try again later.",
            500,
        )


def validate_and_raise(
    condition: bool, message: str, details: Optional[Dict] = None
) -> None:
    """Raise ValidationError(message, details) unless condition holds."""
    if not condition:
        raise ValidationError(message, details)


def not_found_if_none(
    resource: Optional[object], resource_type: str, resource_id: Union[str, int]
) -> object:
    """
    Return resource, or raise NotFoundError if it is None.

    Args:
        resource: Result of a lookup
        resource_type: Type of resource (e.g., "User")
        resource_id: Identifier used in the lookup

    Raises:
        NotFoundError: If resource is None
    """
    if resource is None:
        raise NotFoundError(resource_type, resource_id)
    return resource
