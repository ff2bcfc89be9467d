"""
Domain exceptions.

Raised by stores and application services. The API layer catches these
and translates them into HTTP responses.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from typing import Optional


class OrderServiceError(Exception):
    """Base class for every error raised by the order core."""


class ValidationError(OrderServiceError, ValueError):
    """Caller-supplied data violates an invariant."""


class NotFoundError(OrderServiceError, LookupError):
    """Referenced aggregate does not exist."""


class _CreationFailed(OrderServiceError):
    """
    Failure during an atomic multi-step write.

    The unit of work has already been rolled back when this is raised.

    Attributes:
        cause: Original exception
        stage: Creation stage that was reached when the failure happened
    """

    aggregate = "aggregate"

    def __init__(self, cause: BaseException, stage: Optional[str] = None):
        self.cause = cause
        self.stage = stage
        where = f" after {stage}" if stage else ""
        super().__init__(f"{self.aggregate} creation failed{where}: {cause}")


class OrderCreationFailed(_CreationFailed):
    """Order, items or addresses could not be written."""

    aggregate = "order"


class CreditNoteCreationFailed(_CreationFailed):
    """Credit note or its items could not be written."""

    aggregate = "credit note"


class IntegrityError(OrderServiceError):
    """Export serialization round trip lost records."""
