"""Payout fraction and amount owed to a practitioner for one service record."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from clinic_ledger.models.percentage_tier import PercentageTier
from clinic_ledger.models.service_record import ServiceRecord

OWN_PATIENT_FRACTION = Decimal("0.50")
DEFAULT_FRACTION = Decimal("0.40")

DEFAULT_TIER_FRACTIONS: dict[int, Decimal] = {
    1: Decimal("0.40"),
    2: Decimal("0.50"),
    3: Decimal("0.60"),
}

# Fixed payouts that win over whatever fraction is stored for the tier.
TIER_OVERRIDES: dict[int, Decimal] = {
    3: Decimal("0.60"),
}

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class TierRules:
    """Tier id to payout fraction table, with overrides and fallbacks."""

    fractions: Mapping[int, Decimal] = field(
        default_factory=lambda: dict(DEFAULT_TIER_FRACTIONS)
    )
    overrides: Mapping[int, Decimal] = field(default_factory=lambda: dict(TIER_OVERRIDES))
    own_patient_fraction: Decimal = OWN_PATIENT_FRACTION
    default_fraction: Decimal = DEFAULT_FRACTION

    @classmethod
    def from_tiers(cls, tiers: Iterable[PercentageTier]) -> "TierRules":
        """Build rules from stored tiers; stored values replace the defaults."""
        fractions = dict(DEFAULT_TIER_FRACTIONS)
        for tier in tiers:
            fractions[int(tier.id)] = Decimal(str(tier.fraction))
        return cls(fractions=fractions)

    def fraction_for(self, tier_id: int | None, is_own_patient: bool | None) -> Decimal:
        if tier_id is not None:
            if tier_id in self.overrides:
                return self.overrides[tier_id]
            if tier_id in self.fractions:
                return self.fractions[tier_id]
        return self.own_patient_fraction if is_own_patient else self.default_fraction


@dataclass(frozen=True)
class LineComputation:
    payout_fraction: Decimal
    payout_amount: Decimal


def compute_line(
    record: ServiceRecord,
    tier_rules: TierRules,
    is_own_patient: bool | None = None,
) -> LineComputation:
    """Compute what a practitioner earns on a record.

    The record is only read. ``is_own_patient`` defaults to the record's flag.
    """
    own = record.is_own_patient if is_own_patient is None else is_own_patient
    tier_id = int(record.percentage_tier_id) if record.percentage_tier_id is not None else None
    fraction = tier_rules.fraction_for(tier_id, own)
    billed = Decimal(str(record.billed_total or 0))
    amount = (billed * fraction).quantize(CENTS, rounding=ROUND_HALF_UP)
    return LineComputation(payout_fraction=fraction, payout_amount=amount)
