"""Cash drawer (caja base) service."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_ledger.core.context import RequestContext
from clinic_ledger.core.exceptions import (
    AuthorizationError,
    CashDrawerUpdateError,
    NotFoundError,
    UpstreamFailure,
    ValidationError,
)
from clinic_ledger.repositories.site_repository import SiteRepository

logger = logging.getLogger(__name__)


class CashDrawerService:
    """Reads and adjusts the cash on hand of a site."""

    def __init__(self, db: Session):
        self.db = db
        self.site_repo = SiteRepository(db)

    def get_balance(self, ctx: RequestContext) -> Decimal:
        if ctx.site_id is None:
            raise ValidationError("Select a site first")
        balance = self.site_repo.get_cash_drawer_balance(ctx.site_id)
        if balance is None:
            raise NotFoundError(f"Site {ctx.site_id} not found")
        return balance

    def set_balance(self, ctx: RequestContext, balance: Decimal) -> Decimal:
        """Correct the drawer balance. Only admins and owners may do this."""
        if not ctx.is_admin:
            raise AuthorizationError("Only an admin or owner can change the cash drawer")
        if ctx.site_id is None:
            raise ValidationError("Select a site first")
        if balance < 0:
            raise ValidationError("Cash drawer balance cannot be negative")

        try:
            updated = self.site_repo.set_cash_drawer_balance(ctx.site_id, balance)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to set cash drawer for site %s", ctx.site_id)
            raise UpstreamFailure(f"Could not update cash drawer: {e}") from e

        if updated is None:
            raise NotFoundError(f"Site {ctx.site_id} not found")
        logger.info(
            "Cash drawer for site %s set to %s by %s", ctx.site_id, updated, ctx.username
        )
        return updated

    def increment(self, site_id: UUID, amount: Decimal) -> Decimal:
        """Add cash received to the drawer.

        This is an unlocked read-modify-write; two terminals adding at the
        same time can lose one of the updates.
        """
        try:
            current = self.site_repo.get_cash_drawer_balance(site_id)
            if current is None:
                raise CashDrawerUpdateError(site_id, amount, "site not found")
            updated = self.site_repo.set_cash_drawer_balance(site_id, current + amount)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise CashDrawerUpdateError(site_id, amount, str(e)) from e

        logger.info("Cash drawer for site %s increased by %s to %s", site_id, amount, updated)
        return updated  # type: ignore[return-value]
