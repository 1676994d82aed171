"""
Renewal Upsell Rules

Each UpsellRule maps to one pricing function returning (price, renewal_base).
The renewal base is the part of the price attributable to simple uplift of the
expiring amount; anything above it is upsell.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

from ..catalog import DOUBLE_FEATURE_SURCHARGE_PER_BED, SINGLE_FEATURE_SURCHARGE_PER_BED
from ..models import UpsellRule
from .currency import gross_up_wht

HUNDRED = Decimal("100")

# Fixed uplifts on the expiring amount
ENTERPRISE_UPLIFT = Decimal("1.08")
BASE_TO_ENTERPRISE_UPLIFT = Decimal("1.11")
MID_TIER_PREMIUM = Decimal("8")  # percentage points on top of the renewal uplift


@dataclass(frozen=True)
class RenewalTerms:
    """Inputs shared by every renewal rule for one product."""

    expiring: Decimal
    uplift_rate: Decimal  # percent
    count: int
    apply_wht: bool

    @property
    def standard_base(self) -> Decimal:
        return self.expiring * (1 + self.uplift_rate / HUNDRED)


def same_tier(terms: RenewalTerms) -> tuple[Decimal, Decimal]:
    price = terms.standard_base
    return price, price


def same_enterprise(terms: RenewalTerms) -> tuple[Decimal, Decimal]:
    price = terms.expiring * ENTERPRISE_UPLIFT
    return price, price


def base_to_mid(terms: RenewalTerms) -> tuple[Decimal, Decimal]:
    price = terms.expiring * (1 + (terms.uplift_rate + MID_TIER_PREMIUM) / HUNDRED)
    return price, terms.standard_base


def base_to_enterprise(terms: RenewalTerms) -> tuple[Decimal, Decimal]:
    return terms.expiring * BASE_TO_ENTERPRISE_UPLIFT, terms.standard_base


def mid_to_enterprise(terms: RenewalTerms) -> tuple[Decimal, Decimal]:
    return terms.expiring * ENTERPRISE_UPLIFT, terms.standard_base


def _feature_addon(surcharge_per_bed: Decimal) -> Callable[[RenewalTerms], tuple[Decimal, Decimal]]:
    def rule(terms: RenewalTerms) -> tuple[Decimal, Decimal]:
        surcharge = gross_up_wht(surcharge_per_bed * terms.count, terms.apply_wht)
        return terms.standard_base + surcharge, terms.standard_base

    return rule


def unmapped(terms: RenewalTerms) -> tuple[Decimal, Decimal]:
    """Transition outside the table: priced as a plain uplift renewal."""
    return terms.standard_base, terms.standard_base


RULES: dict[UpsellRule, Callable[[RenewalTerms], tuple[Decimal, Decimal]]] = {
    UpsellRule.SAME_TIER: same_tier,
    UpsellRule.SAME_ENTERPRISE: same_enterprise,
    UpsellRule.BASE_TO_MID: base_to_mid,
    UpsellRule.BASE_TO_ENTERPRISE: base_to_enterprise,
    UpsellRule.MID_TO_ENTERPRISE: mid_to_enterprise,
    UpsellRule.SINGLE_FEATURE_ADDON: _feature_addon(SINGLE_FEATURE_SURCHARGE_PER_BED),
    UpsellRule.DOUBLE_FEATURE_ADDON: _feature_addon(DOUBLE_FEATURE_SURCHARGE_PER_BED),
    UpsellRule.UNMAPPED: unmapped,
}


def apply_rule(rule: UpsellRule, terms: RenewalTerms) -> tuple[Decimal, Decimal]:
    """Price a renewal under the given rule. Returns (price, renewal_base)."""
    return RULES[rule](terms)
