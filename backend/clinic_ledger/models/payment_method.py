"""Payment method model and the closed set of payment method kinds."""

import unicodedata
from enum import Enum

from sqlalchemy import Column, DateTime, String, func

from clinic_ledger.core.database import Base
from clinic_ledger.models.shared import UUIDType, generate_uuid


def _normalize(label: str) -> str:
    decomposed = unicodedata.normalize("NFKD", label.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class PaymentMethodKind(str, Enum):
    """Payment channels and the rules attached to each one."""

    CASH = "cash"
    TRANSFER = "transfer"
    CARD = "card"
    CREDIT = "credit"
    OTHER = "other"

    @property
    def is_cash(self) -> bool:
        return self is PaymentMethodKind.CASH

    @property
    def requires_account_selection(self) -> bool:
        return self is PaymentMethodKind.TRANSFER

    @property
    def requires_credit_holder(self) -> bool:
        return self is PaymentMethodKind.CREDIT

    @property
    def applies_surcharge(self) -> bool:
        """Card payments through the datáfono carry a processing surcharge."""
        return self is PaymentMethodKind.CARD

    @classmethod
    def from_label(cls, label: str) -> "PaymentMethodKind":
        """Map a front-desk label such as "Datáfono" to its kind."""
        return _LABELS.get(_normalize(label), cls.OTHER)


_LABELS = {
    "efectivo": PaymentMethodKind.CASH,
    "cash": PaymentMethodKind.CASH,
    "transferencia": PaymentMethodKind.TRANSFER,
    "transfer": PaymentMethodKind.TRANSFER,
    "datafono": PaymentMethodKind.CARD,
    "card": PaymentMethodKind.CARD,
    "credito": PaymentMethodKind.CREDIT,
    "credit": PaymentMethodKind.CREDIT,
}


class PaymentMethod(Base):
    """A payment method offered at the front desk.

    ``name`` is the label shown to staff (e.g. "Efectivo", "Datáfono");
    ``kind`` holds a PaymentMethodKind value.
    """

    __tablename__ = "payment_methods"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False, unique=True)
    kind = Column(String(20), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def method_kind(self) -> PaymentMethodKind:
        return PaymentMethodKind(self.kind)
