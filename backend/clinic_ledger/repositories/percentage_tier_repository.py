from sqlalchemy.orm import Session

from clinic_ledger.models.percentage_tier import PercentageTier
from clinic_ledger.schemas.percentage_tier import PercentageTierCreate


class PercentageTierRepository:
    """Repository for PercentageTier model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[PercentageTier]:
        return self.db.query(PercentageTier).order_by(PercentageTier.id.asc()).all()

    def upsert(self, data: PercentageTierCreate) -> PercentageTier:
        tier = self.db.query(PercentageTier).filter(PercentageTier.id == data.id).first()
        if tier is None:
            tier = PercentageTier(id=data.id)
            self.db.add(tier)
        tier.fraction = data.fraction  # type: ignore[assignment]
        tier.description = data.description  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(tier)
        return tier
