"""
Product Catalog

Static reference data: products, their variants with per-unit list prices (USD),
and the renewal transition table mapping (existing, target) variant pairs to a
named upsell rule.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .models import UpsellRule

PHYSICIAN_PRODUCT = "utd"
BED_PRODUCT = "ld"


class PhysicianVariant(str, Enum):
    """Per-physician product tiers, lowest to highest."""

    ANYWHERE = "ANYWHERE"  # base tier
    UTDADV = "UTDADV"  # mid tier
    UTDEE = "UTDEE"  # top enterprise tier


class BedVariant(str, Enum):
    """Per-bed product tiers. EE_COMBO is only offered alongside the physician product."""

    BASE_PKG = "BASE PKG"
    FLINK = "+FLINK"
    FLINK_IPE = "+FLINK+IPE"
    EE_COMBO = "EE-Combo"


@dataclass(frozen=True)
class ProductDefinition:
    id: str
    name: str
    short_name: str
    count_label: str
    unit_label: str
    variants: dict[str, Decimal] = field(default_factory=dict)
    combo_only_variants: frozenset[str] = frozenset()

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    def list_price(self, variant: str) -> Decimal:
        """Per-unit list price; unknown variants price at zero."""
        return self.variants.get(variant, Decimal("0"))

    def available_variants(self, combo: bool) -> list[str]:
        return [v for v in self.variants if combo or v not in self.combo_only_variants]


PRODUCTS: dict[str, ProductDefinition] = {
    PHYSICIAN_PRODUCT: ProductDefinition(
        id=PHYSICIAN_PRODUCT,
        name="UTD (Unlimited Tax Database)",
        short_name="UTD",
        count_label="HC",
        unit_label="physician",
        variants={
            PhysicianVariant.ANYWHERE.value: Decimal("259"),
            PhysicianVariant.UTDADV.value: Decimal("270"),
            PhysicianVariant.UTDEE.value: Decimal("265"),
        },
    ),
    BED_PRODUCT: ProductDefinition(
        id=BED_PRODUCT,
        name="LXD (Legal Database)",
        short_name="LD",
        count_label="BC",
        unit_label="bed",
        variants={
            BedVariant.BASE_PKG.value: Decimal("80"),
            BedVariant.FLINK.value: Decimal("92"),
            BedVariant.FLINK_IPE.value: Decimal("108"),
            BedVariant.EE_COMBO.value: Decimal("66.25"),  # 0.25 x UTDEE
        },
        combo_only_variants=frozenset({BedVariant.EE_COMBO.value}),
    ),
}


# Per-bed surcharges for feature add-ons on renewal, before WHT gross-up.
# One feature added (FLINK, or IPE on top of FLINK) vs. both added at once.
SINGLE_FEATURE_SURCHARGE_PER_BED = Decimal("12")
DOUBLE_FEATURE_SURCHARGE_PER_BED = Decimal("28")


def _key(product_id: str, existing: Enum, target: Enum) -> tuple[str, str, str]:
    return (product_id, existing.value, target.value)


_P = PhysicianVariant
_B = BedVariant

TRANSITIONS: dict[tuple[str, str, str], UpsellRule] = {
    _key(PHYSICIAN_PRODUCT, _P.ANYWHERE, _P.ANYWHERE): UpsellRule.SAME_TIER,
    _key(PHYSICIAN_PRODUCT, _P.UTDADV, _P.UTDADV): UpsellRule.SAME_TIER,
    _key(PHYSICIAN_PRODUCT, _P.UTDEE, _P.UTDEE): UpsellRule.SAME_ENTERPRISE,
    _key(PHYSICIAN_PRODUCT, _P.ANYWHERE, _P.UTDADV): UpsellRule.BASE_TO_MID,
    _key(PHYSICIAN_PRODUCT, _P.ANYWHERE, _P.UTDEE): UpsellRule.BASE_TO_ENTERPRISE,
    _key(PHYSICIAN_PRODUCT, _P.UTDADV, _P.UTDEE): UpsellRule.MID_TO_ENTERPRISE,
    _key(BED_PRODUCT, _B.BASE_PKG, _B.BASE_PKG): UpsellRule.SAME_TIER,
    _key(BED_PRODUCT, _B.FLINK, _B.FLINK): UpsellRule.SAME_TIER,
    _key(BED_PRODUCT, _B.FLINK_IPE, _B.FLINK_IPE): UpsellRule.SAME_TIER,
    _key(BED_PRODUCT, _B.EE_COMBO, _B.EE_COMBO): UpsellRule.SAME_TIER,
    _key(BED_PRODUCT, _B.BASE_PKG, _B.FLINK): UpsellRule.SINGLE_FEATURE_ADDON,
    _key(BED_PRODUCT, _B.FLINK, _B.FLINK_IPE): UpsellRule.SINGLE_FEATURE_ADDON,
    _key(BED_PRODUCT, _B.BASE_PKG, _B.FLINK_IPE): UpsellRule.DOUBLE_FEATURE_ADDON,
}


def get_product(product_id: str) -> ProductDefinition | None:
    return PRODUCTS.get(product_id)


def short_name(product_id: str) -> str:
    product = PRODUCTS.get(product_id)
    return product.short_name if product else product_id.upper()


def classify_transition(product_id: str, existing_variant: str, target_variant: str) -> UpsellRule:
    """Look up the renewal rule for a variant change; uncovered pairs are UNMAPPED."""
    return TRANSITIONS.get((product_id, existing_variant, target_variant), UpsellRule.UNMAPPED)


def allowed_targets(product_id: str, existing_variant: str) -> list[str]:
    """Target variants a renewal may move to from the existing variant."""
    targets = [
        target
        for (pid, existing, target) in TRANSITIONS
        if pid == product_id and existing == existing_variant
    ]
    return targets or [existing_variant]


def catalog_to_dict() -> list[dict]:
    """Serialize the catalog, including allowed renewal targets per variant."""
    return [
        {
            "id": product.id,
            "name": product.name,
            "short_name": product.short_name,
            "count_label": product.count_label,
            "has_variants": product.has_variants,
            "standalone_variants": product.available_variants(combo=False),
            "combo_variants": product.available_variants(combo=True),
            "variants": [
                {
                    "name": name,
                    "list_price": float(price),
                    "combo_only": name in product.combo_only_variants,
                    "renewal_targets": allowed_targets(product.id, name),
                }
                for name, price in product.variants.items()
            ],
        }
        for product in PRODUCTS.values()
    ]
