"""Failure kinds raised by the persistence layer."""

from sqlalchemy import exc as sa_exc


class GatewayError(Exception):
    """Base class for repository failures."""


class UserValidationError(GatewayError):
    """Input was missing or malformed; nothing reached the store."""


class StoreConnectionError(GatewayError):
    """The store could not be reached or the connection failed mid-call."""


class StoreConstraintError(GatewayError):
    """The store rejected the statement (constraint, data or schema error)."""


# Statement-level rejections; every other SQLAlchemy error is treated as a
# connectivity failure.
_REJECTION_ERRORS = (
    sa_exc.IntegrityError,
    sa_exc.DataError,
    sa_exc.ProgrammingError,
)


def translate_store_error(error: sa_exc.SQLAlchemyError, action: str) -> GatewayError:
    """Map a SQLAlchemy exception to a gateway failure kind."""
    if isinstance(error, _REJECTION_ERRORS):
        return StoreConstraintError(f"Store rejected {action}")
    return StoreConnectionError(f"Store unavailable while trying to {action}")
