"""Error taxonomy for ledger operations.

Services raise these; routers translate them into HTTP responses.
"""


class ClinicLedgerError(Exception):
    """Base class for all ledger errors."""


class ValidationError(ClinicLedgerError):
    """Input is missing or inconsistent. Raised before any state change."""


class NotFoundError(ClinicLedgerError):
    """A referenced catalog service, record or report does not exist."""


class AuthorizationError(ClinicLedgerError):
    """The acting user may not perform the operation."""


class ConflictError(ClinicLedgerError):
    """The record changed since it was read, or is already closed."""


class UpstreamFailure(ClinicLedgerError):
    """The persistence layer failed. Not retried automatically."""


class CashDrawerUpdateError(UpstreamFailure):
    """The cash drawer could not be adjusted after a committed ledger update.

    The ledger and the drawer are not updated atomically, so this leaves a
    discrepancy that an operator has to reconcile by hand.
    """

    def __init__(self, site_id: object, amount: object, reason: str):
        self.site_id = site_id
        self.amount = amount
        self.reason = reason
        super().__init__(
            f"Cash drawer for site {site_id} was not adjusted by {amount}: {reason}"
        )


_STATUS_CODES: dict[type[ClinicLedgerError], int] = {
    ValidationError: 400,
    AuthorizationError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    UpstreamFailure: 502,
}


def status_code_for(error: ClinicLedgerError) -> int:
    """HTTP status code for a ledger error (most specific class wins)."""
    for cls in type(error).__mro__:
        if cls in _STATUS_CODES:
            return _STATUS_CODES[cls]
    return 500
