"""Catalog service repository for data access."""

from decimal import Decimal

from sqlalchemy.orm import Session

from clinic_ledger.models.catalog_service import CatalogService, PriceList
from clinic_ledger.schemas.catalog_service import CatalogServiceCreate


class CatalogServiceRepository:
    """Repository for CatalogService model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, price_list: PriceList = PriceList.STANDARD) -> list[CatalogService]:
        return (
            self.db.query(CatalogService)
            .filter(CatalogService.price_list == price_list.value)
            .order_by(CatalogService.name.asc())
            .all()
        )

    def get_price_map(self, price_list: PriceList = PriceList.STANDARD) -> dict[str, Decimal]:
        """Service name to price for one price list."""
        return {
            str(service.name): Decimal(str(service.price))
            for service in self.get_all(price_list)
        }

    def create(self, data: CatalogServiceCreate) -> CatalogService:
        service = CatalogService(
            name=data.name,
            price=data.price,
            price_list=data.price_list.value,
        )
        self.db.add(service)
        self.db.commit()
        self.db.refresh(service)
        return service
