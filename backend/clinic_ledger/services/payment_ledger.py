"""Payment ledger adjustor.

Applies a payment or deposit to a service record's running balance. The
functions here only compute the new state; persisting it and adjusting the
cash drawer is left to the caller, in that order.
"""

from dataclasses import dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from clinic_ledger.core.exceptions import ConflictError, ValidationError
from clinic_ledger.models.payment_method import PaymentMethodKind

CARD_SURCHARGE_RATE = Decimal("0.05")
ZERO = Decimal("0")


def _dec(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else ZERO


def amount_to_charge(amount: Decimal, payment_method: PaymentMethodKind | None) -> Decimal:
    """Amount to key into the terminal for a nominal payment.

    Card payments add the datáfono surcharge and round to whole pesos; the
    ledger still records the nominal amount.
    """
    if payment_method is not None and payment_method.applies_surcharge:
        return (amount * (1 + CARD_SURCHARGE_RATE)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return amount


def cash_received(amount: Decimal, payment_method: PaymentMethodKind | None) -> Decimal:
    """Portion of a payment that lands in the cash drawer."""
    if payment_method is not None and payment_method.is_cash:
        return amount
    return ZERO


@dataclass(frozen=True)
class LedgerState:
    """Payment-related fields of a service record."""

    outstanding: Decimal
    amount_paid: Decimal = ZERO
    deposit: Decimal = ZERO
    completion_date: date | None = None

    @classmethod
    def of(cls, record: Any) -> "LedgerState":
        """Snapshot a record (or anything with the same attributes)."""
        return cls(
            outstanding=_dec(record.outstanding),
            amount_paid=_dec(record.amount_paid),
            deposit=_dec(record.deposit),
            completion_date=record.completion_date,
        )

    @property
    def is_open(self) -> bool:
        return self.completion_date is None


@dataclass(frozen=True)
class PaymentOutcome:
    state: LedgerState
    is_fully_paid: bool
    nominal_amount: Decimal
    amount_to_charge: Decimal
    overpayment: Decimal


def apply_payment(
    record: Any,
    amount: Decimal,
    payment_method: PaymentMethodKind | None = None,
    transaction_date: date | None = None,
    as_deposit: bool = False,
) -> PaymentOutcome:
    """Apply a nominal payment ``amount`` to ``record``.

    Outstanding never drops below zero. A payment covering the whole
    outstanding value closes the record on ``transaction_date``. Deposits
    accumulate in ``deposit`` instead of ``amount_paid``.
    """
    state = record if isinstance(record, LedgerState) else LedgerState.of(record)
    amount = _dec(amount)

    if amount < 0:
        raise ValidationError("Payment amount cannot be negative")
    if state.outstanding < 0:
        raise ValidationError("Record has a negative outstanding value")
    if not state.is_open:
        raise ConflictError("Record is already closed")

    is_fully_paid = amount >= state.outstanding
    new_outstanding = max(ZERO, state.outstanding - amount)

    if as_deposit:
        new_state = replace(state, outstanding=new_outstanding, deposit=state.deposit + amount)
    else:
        new_state = replace(
            state, outstanding=new_outstanding, amount_paid=state.amount_paid + amount
        )
    if is_fully_paid:
        new_state = replace(new_state, completion_date=transaction_date or date.today())

    return PaymentOutcome(
        state=new_state,
        is_fully_paid=is_fully_paid,
        nominal_amount=amount,
        amount_to_charge=amount_to_charge(amount, payment_method),
        overpayment=max(ZERO, amount - state.outstanding),
    )
