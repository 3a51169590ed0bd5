"""Domain error hierarchy.

Each error carries the HTTP status and the stable machine-readable code the
API returns for it.  Services raise these; ``marketplace.main`` renders them.
None of them is retried by the core.
"""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for every error the marketplace core reports."""

    status_code: int = 400
    code: str = "marketplace_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class ValidationError(MarketplaceError):
    """A required field is missing or malformed (e.g. non-positive budget)."""

    status_code = 422
    code = "validation_error"


class InvalidBid(ValidationError):
    """Bid payload fails validation."""

    code = "invalid_bid"


class NotFound(MarketplaceError):
    """A job, bid or profile id does not resolve."""

    status_code = 404
    code = "not_found"


class PermissionDenied(MarketplaceError):
    """The caller's role or ownership does not allow the write."""

    status_code = 403
    code = "permission_denied"


class InvalidTransition(MarketplaceError):
    """Illegal state-machine move for a job or bid."""

    status_code = 409
    code = "invalid_transition"


class DuplicateBid(MarketplaceError):
    """The provider already has a bid on this job."""

    status_code = 409
    code = "duplicate_bid"


class JobNotOpen(MarketplaceError):
    """The action requires an open job but the job has moved on.

    Expected under races (two concurrent acceptances); callers treat it as
    a normal outcome.
    """

    status_code = 409
    code = "job_not_open"


class ProvisioningFailed(MarketplaceError):
    """The caller's profile could neither be created nor fetched."""

    status_code = 503
    code = "provisioning_failed"
