"""
Error taxonomy for the dataset catalog.

Every error carries the status class it resolves to at the transport
boundary, so adapters never decide status codes by matching on messages.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator

# Get logger for this module
logger = logging.getLogger(__name__)


class StatusClass(Enum):
    """Response class an error resolves to."""

    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    INTERNAL = "internal"

    @property
    def http_status(self) -> int:
        return {
            StatusClass.NOT_FOUND: 404,
            StatusClass.BAD_REQUEST: 400,
            StatusClass.INTERNAL: 500,
        }[self]


class CatalogError(Exception):
    """Base exception for catalog read errors."""

    status_class = StatusClass.INTERNAL
    message = "internal error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class NotFoundError(CatalogError):
    """Raised when a resource does not exist at the requested visibility."""

    status_class = StatusClass.NOT_FOUND
    message = "resource not found"


class DatasetNotFoundError(NotFoundError):
    message = "dataset not found"


class EditionNotFoundError(NotFoundError):
    message = "edition not found"


class VersionNotFoundError(NotFoundError):
    message = "version not found"


class DimensionNotFoundError(NotFoundError):
    message = "dimension not found"


class MalformedIdentifierError(CatalogError):
    """Raised when a version path segment is not a positive integer."""

    status_class = StatusClass.BAD_REQUEST
    message = "invalid version requested"


class InvalidStateError(CatalogError):
    """Raised when a stored version carries a state the read path cannot serve."""

    message = "incorrect resource state"

    def __init__(self, state: str, detail: str = "") -> None:
        super().__init__(detail or f"invalid version state: {state!r}")
        self.state = state


class CollaboratorFailureError(CatalogError):
    """Raised when the document store or URL builder fails unexpectedly."""

    def __init__(self, collaborator: str, detail: str = "") -> None:
        super().__init__(detail or f"{collaborator} call failed")
        self.collaborator = collaborator


@contextmanager
def collaborator_call(collaborator: str) -> Iterator[None]:
    """
    Wrap unexpected collaborator errors in CollaboratorFailureError.

    Catalog errors raised inside the block pass through unchanged.

    Args:
        collaborator: Name recorded on the wrapped error and in the log
    """
    try:
        yield
    except CatalogError:
        raise
    except Exception as e:
        logger.error("%s call failed: %s", collaborator, str(e))
        raise CollaboratorFailureError(collaborator) from e
