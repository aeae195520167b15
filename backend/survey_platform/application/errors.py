"""Application error taxonomy.

Every failure that should reach a user is an ``AppError``. Each error belongs to
one ``ErrorKind`` which fixes its HTTP status code. Errors keep two messages:

- ``internal_message``: diagnostic text, written to logs only.
- ``user_message``: text that is safe to render; defaults to the internal message.

The web error boundary matches on ``error.kind`` instead of on subclasses, so
adding a kind means adding an enum member and a branch there.
"""

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from enum import Enum

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from survey_platform.infrastructure.logging import get_logger

logger = get_logger(__name__)

GENERIC_DATABASE_MESSAGE = "A technical error occurred. Please try again later."


class ErrorKind(Enum):
    validation = 422
    unauthorized = 401
    forbidden = 403
    not_found = 404
    conflict = 409
    database = 500
    business_logic = 400

    @property
    def status_code(self) -> int:
        return self.value


class AppError(Exception):
    """Base application-layer error, independent from transport concerns."""

    kind: ErrorKind = ErrorKind.database

    def __init__(self, internal_message: str, user_message: str | None = None, *, cause: Exception | None = None):
        if not internal_message or not internal_message.strip():
            raise ValueError(f"{type(self).__name__} requires a non-empty internal message")
        super().__init__(internal_message)
        self.internal_message = internal_message
        self.user_message = user_message or internal_message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def http_status_code(self) -> int:
        return self.kind.status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.internal_message!r}, status={self.http_status_code})"


class ValidationError(AppError):
    """Raised when submitted data fails validation; carries per-field messages."""

    kind = ErrorKind.validation

    def __init__(
        self,
        internal_message: str,
        field_errors: Mapping[str, Sequence[str]] | None = None,
        user_message: str | None = None,
        *,
        cause: Exception | None = None,
    ):
        super().__init__(internal_message, user_message, cause=cause)
        self._field_errors = {field: list(messages) for field, messages in (field_errors or {}).items()}

    @property
    def field_errors(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._field_errors.items()}

    def all_messages(self) -> list[str]:
        return [message for messages in self._field_errors.values() for message in messages]


class UnauthorizedError(AppError):
    """Raised when the operation requires a logged-in user."""

    kind = ErrorKind.unauthorized


class ForbiddenError(AppError):
    """Raised when the current user may not perform the operation."""

    kind = ErrorKind.forbidden


class NotFoundError(AppError):
    """Raised when an expected entity does not exist."""

    kind = ErrorKind.not_found


class ConflictError(AppError):
    """Raised when a uniqueness or state conflict occurs."""

    kind = ErrorKind.conflict


class DatabaseError(AppError):
    """Raised when a query fails; the user only ever sees a generic message."""

    kind = ErrorKind.database


class BusinessLogicError(AppError):
    """Raised when a request is well-formed but breaks a business rule."""

    kind = ErrorKind.business_logic


def validation_error_from_pydantic(exc: PydanticValidationError, message: str = "Validation failed") -> ValidationError:
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "__all__"
        text = str(error.get("msg", "Invalid value"))
        if text.startswith("Value error, "):
            text = text[len("Value error, ") :]
        field_errors.setdefault(field, []).append(text)
    return ValidationError(message, field_errors, cause=exc)


@contextmanager
def database_errors(operation: str) -> Iterator[None]:
    """Wrap raw driver failures raised inside the block into ``DatabaseError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("database_operation_failed", operation=operation, error=str(exc))
        raise DatabaseError(f"{operation} failed: {exc}", GENERIC_DATABASE_MESSAGE, cause=exc) from exc
