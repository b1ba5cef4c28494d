"""Valuation of a new service entry before any payment is taken."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from clinic_ledger.core.exceptions import NotFoundError, ValidationError
from clinic_ledger.models.service_record import ServiceRecord
from clinic_ledger.services.payment_ledger import CARD_SURCHARGE_RATE

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Discount:
    """A flat amount, or a percentage of the billed total."""

    value: Decimal
    is_percentage: bool = False

    def amount_for(self, billed_total: Decimal) -> Decimal:
        if self.is_percentage:
            return (billed_total * self.value / HUNDRED).quantize(CENTS, rounding=ROUND_HALF_UP)
        return self.value


@dataclass(frozen=True)
class ValuationLine:
    service_name: str
    billed_total: Decimal
    outstanding: Decimal
    continued_record: ServiceRecord | None = None

    @property
    def is_continuation(self) -> bool:
        return self.continued_record is not None


@dataclass(frozen=True)
class Valuation:
    lines: tuple[ValuationLine, ...]
    billed_total: Decimal
    gross_value: Decimal
    credit_applied: Decimal
    discount_applied: Decimal
    net_value: Decimal
    surcharged: bool


def valuate_new_services(
    selected_service_names: Iterable[str],
    catalog: Mapping[str, Decimal],
    open_records_for_patient: Iterable[ServiceRecord],
    credit_balance: Decimal = ZERO,
    discount: Discount | None = None,
    surcharge: bool = False,
) -> Valuation:
    """Value the selected services for one patient.

    Steps run in a fixed order: catalog or continuation lookup, sum,
    subtract credit, subtract discount, apply the card surcharge. A service
    with an open record continues at that record's outstanding value and
    billed total instead of the current catalog price.
    """
    names = [name for name in selected_service_names if name and name.strip()]
    if not names:
        raise ValidationError("Select at least one service")

    credit_balance = Decimal(str(credit_balance or 0))
    if credit_balance < 0:
        raise ValidationError("Credit balance cannot be negative")
    if discount is not None:
        if discount.value < 0:
            raise ValidationError("Discount cannot be negative")
        if discount.is_percentage and discount.value > HUNDRED:
            raise ValidationError("Percentage discount cannot exceed 100")

    # One open record per patient and service: a name may appear only once.
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ValidationError(f"Service '{name}' is selected more than once")
        seen.add(name)

    open_records = [r for r in open_records_for_patient if r.completion_date is None]
    lines = []
    for name in names:
        if name not in catalog:
            raise NotFoundError(f"Service '{name}' not found in catalog")

        ongoing = next((r for r in open_records if r.service_name == name), None)
        if ongoing is not None:
            lines.append(
                ValuationLine(
                    service_name=name,
                    billed_total=Decimal(str(ongoing.billed_total or 0)),
                    outstanding=Decimal(str(ongoing.outstanding or 0)),
                    continued_record=ongoing,
                )
            )
        else:
            price = Decimal(str(catalog[name]))
            lines.append(ValuationLine(service_name=name, billed_total=price, outstanding=price))

    billed_total = sum((line.billed_total for line in lines), ZERO)
    gross_value = sum((line.outstanding for line in lines), ZERO)

    credit_applied = min(credit_balance, gross_value)
    value = gross_value - credit_applied

    discount_applied = ZERO
    if discount is not None:
        discount_applied = min(discount.amount_for(billed_total), value)
        value -= discount_applied

    if surcharge:
        value = (value * (1 + CARD_SURCHARGE_RATE)).quantize(CENTS, rounding=ROUND_HALF_UP)

    return Valuation(
        lines=tuple(lines),
        billed_total=billed_total,
        gross_value=gross_value,
        credit_applied=credit_applied,
        discount_applied=discount_applied,
        net_value=value,
        surcharged=surcharge,
    )
