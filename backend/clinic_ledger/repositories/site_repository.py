"""Site repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from clinic_ledger.models.site import Site
from clinic_ledger.schemas.site import SiteCreate


class SiteRepository:
    """Repository for Site model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[Site]:
        return self.db.query(Site).order_by(Site.name.asc()).all()

    def get_by_id(self, site_id: UUID) -> Site | None:
        return self.db.query(Site).filter(Site.id == site_id).first()

    def create(self, data: SiteCreate) -> Site:
        site = Site(
            name=data.name,
            has_stadium_prices=data.has_stadium_prices,
            cash_drawer_balance=data.cash_drawer_balance,
        )
        self.db.add(site)
        self.db.commit()
        self.db.refresh(site)
        return site

    def get_cash_drawer_balance(self, site_id: UUID) -> Decimal | None:
        site = self.get_by_id(site_id)
        if not site:
            return None
        return Decimal(str(site.cash_drawer_balance))

    def set_cash_drawer_balance(self, site_id: UUID, balance: Decimal) -> Decimal | None:
        """Overwrite the cash drawer balance of a site."""
        site = self.get_by_id(site_id)
        if not site:
            return None
        site.cash_drawer_balance = balance  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(site)
        return Decimal(str(site.cash_drawer_balance))
