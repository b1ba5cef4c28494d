"""Payment method repository for data access."""

from sqlalchemy.orm import Session

from clinic_ledger.models.payment_method import PaymentMethod, PaymentMethodKind
from clinic_ledger.schemas.payment_method import PaymentMethodCreate


class PaymentMethodRepository:
    """Repository for PaymentMethod model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[PaymentMethod]:
        return self.db.query(PaymentMethod).order_by(PaymentMethod.name.asc()).all()

    def get_by_name(self, name: str) -> PaymentMethod | None:
        return self.db.query(PaymentMethod).filter(PaymentMethod.name == name.strip()).first()

    def create(self, data: PaymentMethodCreate) -> PaymentMethod:
        """Create a payment method, deriving its kind from the name if not given."""
        kind = data.kind or PaymentMethodKind.from_label(data.name)
        method = PaymentMethod(name=data.name.strip(), kind=kind.value)
        self.db.add(method)
        self.db.commit()
        self.db.refresh(method)
        return method
