"""
Domain Models for the Quote Pricing Engine

These dataclasses provide type-safe representations of all business entities.
All monetary values and rates use Decimal for precision.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

# =============================================================================
# ENUMS
# =============================================================================


class DealType(str, Enum):
    NEW_LOGO = "New Logo"
    RENEWAL = "Renewal"


class ChannelType(str, Enum):
    DIRECT = "Direct"
    FULFILMENT = "Fulfilment"
    PARTNER_SOURCED = "Partner Sourced"

    @property
    def is_indirect(self) -> bool:
        return self is not ChannelType.DIRECT


class PricingMethod(str, Enum):
    MYFPI = "MYFPI (Inflation)"
    MYPP = "MYPP (Price Protection)"


class UpsellRule(str, Enum):
    """Named pricing rule for a renewal transition (existing -> target variant)."""

    SAME_TIER = "same_tier"
    SAME_ENTERPRISE = "same_enterprise"
    BASE_TO_MID = "base_to_mid"
    BASE_TO_ENTERPRISE = "base_to_enterprise"
    MID_TO_ENTERPRISE = "mid_to_enterprise"
    SINGLE_FEATURE_ADDON = "single_feature_addon"
    DOUBLE_FEATURE_ADDON = "double_feature_addon"
    UNMAPPED = "unmapped"


def parse_enum(enum_cls, value):
    """Accept an enum member, its display value, or its name (any case)."""
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if value == member.value:
            return member
    if isinstance(value, str):
        key = value.strip().upper().replace(" ", "_").replace("-", "_")
        if key in enum_cls.__members__:
            return enum_cls[key]
    raise ValueError(f"Invalid {enum_cls.__name__}: {value!r}")


def to_decimal(value) -> Decimal:
    """Convert a JSON number (or None) to Decimal; None reads as zero."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _pick(data: dict, camel: str, snake: str, default=None):
    if camel in data:
        return data[camel]
    return data.get(snake, default)


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class ProductInput:
    """Per-product inputs for one deal."""

    count: int = 0  # HC (physicians) or BC (beds)
    variant: str = ""
    base_discount: Decimal = Decimal("0")  # percent
    expiring_amount: Decimal = Decimal("0")  # USD, renewals only
    existing_variant: str | None = None
    existing_count: int | None = None
    dph: Decimal = Decimal("0")
    change_in_stats: bool = False

    @property
    def renewing_from(self) -> str:
        """Variant on the expiring contract; defaults to the target variant."""
        return self.existing_variant or self.variant

    @classmethod
    def from_dict(cls, data: dict) -> "ProductInput":
        existing_count = _pick(data, "existingCount", "existing_count")
        return cls(
            count=int(data.get("count") or 0),
            variant=data.get("variant") or "",
            base_discount=to_decimal(_pick(data, "baseDiscount", "base_discount")),
            expiring_amount=to_decimal(_pick(data, "expiringAmount", "expiring_amount")),
            existing_variant=_pick(data, "existingVariant", "existing_variant"),
            existing_count=int(existing_count) if existing_count is not None else None,
            dph=to_decimal(data.get("dph")),
            change_in_stats=bool(_pick(data, "changeInStats", "change_in_stats", False)),
        )


@dataclass(frozen=True)
class DealConfiguration:
    """A complete, immutable deal configuration. One computation per snapshot."""

    deal_type: DealType
    channel: ChannelType
    selected_products: tuple[str, ...]
    years: int
    method: PricingMethod
    product_inputs: dict[str, ProductInput] = field(default_factory=dict)
    rates: tuple[Decimal, ...] = ()
    product_rates: dict[str, tuple[Decimal, ...]] = field(default_factory=dict)
    renewal_uplift_rates: dict[str, Decimal] = field(default_factory=dict)
    apply_wht: bool = False
    flat_pricing: bool = False
    rounding: bool = False
    # Force entry 0 of every rate array to 0% before use
    zero_anchor_rate: bool = True

    def input_for(self, product_id: str) -> ProductInput:
        return self.product_inputs.get(product_id) or ProductInput()

    def has_product(self, product_id: str) -> bool:
        return product_id in self.selected_products

    def rates_for(self, product_id: str) -> tuple[Decimal, ...]:
        """Product-specific rate array, falling back to the global array."""
        rates = self.product_rates.get(product_id) or self.rates
        if self.zero_anchor_rate and rates:
            return (Decimal("0"),) + tuple(rates[1:])
        return tuple(rates)

    def rate_at(self, product_id: str, index: int) -> Decimal:
        """Rate (percent) for a product in a given year index; missing entries read as 0%."""
        rates = self.rates_for(product_id)
        if 0 <= index < len(rates):
            return rates[index]
        return Decimal("0")

    def renewal_uplift_for(self, product_id: str) -> Decimal:
        """Renewal uplift (percent) used for the standard renewal base.

        Products without an explicit uplift fall back to the year-1 entry of
        their rate array.
        """
        if product_id in self.renewal_uplift_rates:
            return self.renewal_uplift_rates[product_id]
        return self.rate_at(product_id, 0)

    @classmethod
    def from_dict(cls, data: dict) -> "DealConfiguration":
        """Build a configuration from the UI payload (camelCase or snake_case keys)."""
        inputs = _pick(data, "productInputs", "product_inputs", {}) or {}
        product_rates = _pick(data, "productRates", "product_rates", {}) or {}
        uplifts = _pick(data, "renewalUpliftRates", "renewal_uplift_rates", {}) or {}
        return cls(
            deal_type=parse_enum(DealType, _pick(data, "dealType", "deal_type")),
            channel=parse_enum(ChannelType, data["channel"]),
            selected_products=tuple(_pick(data, "selectedProducts", "selected_products", [])),
            years=int(data["years"]),
            method=parse_enum(PricingMethod, data["method"]),
            product_inputs={pid: ProductInput.from_dict(raw) for pid, raw in inputs.items()},
            rates=tuple(to_decimal(r) for r in data.get("rates", [])),
            product_rates={
                pid: tuple(to_decimal(r) for r in rates) for pid, rates in product_rates.items()
            },
            renewal_uplift_rates={pid: to_decimal(rate) for pid, rate in uplifts.items()},
            apply_wht=bool(_pick(data, "applyWHT", "apply_wht", False)),
            flat_pricing=bool(_pick(data, "flatPricing", "flat_pricing", False)),
            rounding=bool(data.get("rounding", False)),
            zero_anchor_rate=bool(_pick(data, "zeroAnchorRate", "zero_anchor_rate", True)),
        )


# =============================================================================
# STAGE RESULT MODELS
# =============================================================================


@dataclass
class ProductResolution:
    """Year-1 pricing outcome for a single product."""

    product_id: str
    base_net: Decimal = Decimal("0")  # list x count, discounted, WHT grossed-up
    year1_net: Decimal = Decimal("0")
    standard_base: Decimal = Decimal("0")
    renewal_base: Decimal = Decimal("0")
    rule: UpsellRule | None = None  # None for new-logo deals
    stats_override: bool = False


@dataclass
class Year1Resolution:
    """Results of the year-1 base price step."""

    products: dict[str, ProductResolution] = field(default_factory=dict)
    renewal_base_total: Decimal = Decimal("0")
    notes: list[str] = field(default_factory=list)
    unmapped_transitions: list[str] = field(default_factory=list)

    @property
    def year1_nets(self) -> dict[str, Decimal]:
        return {pid: p.year1_net for pid, p in self.products.items()}


@dataclass
class FloorAdjustment:
    """Results of floor enforcement on the year-1 nets."""

    year1_nets: dict[str, Decimal] = field(default_factory=dict)
    floor_adjusted: bool = False
    notes: list[str] = field(default_factory=list)


@dataclass
class MetricsSplit:
    """ACV and renewal/upsell split."""

    acv_usd: Decimal = Decimal("0")
    net_acv: Decimal = Decimal("0")
    renewal_base_acv: Decimal = Decimal("0")
    net_renewal_base_acv: Decimal = Decimal("0")
    upsell_acv: Decimal = Decimal("0")
    net_upsell_acv: Decimal = Decimal("0")


# =============================================================================
# OUTPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class ProductYearlyData:
    """One product's figures for one contract year."""

    id: str
    gross: Decimal  # USD
    gross_sar: Decimal
    net: Decimal  # USD


@dataclass(frozen=True)
class YearResult:
    """One contract year of the schedule."""

    year: int  # 1-based
    breakdown: tuple[ProductYearlyData, ...]
    gross_usd: Decimal
    gross_sar: Decimal
    vat_sar: Decimal
    grand_total_sar: Decimal
    net_usd: Decimal
    net_sar: Decimal
    floor_adjusted: bool = False
    notes: tuple[str, ...] = ()


@dataclass
class AggregateTotals:
    """Results of the aggregation step."""

    yearly_results: list[YearResult] = field(default_factory=list)
    total_gross_usd: Decimal = Decimal("0")
    total_gross_sar: Decimal = Decimal("0")
    total_vat_sar: Decimal = Decimal("0")
    total_grand_total_sar: Decimal = Decimal("0")
    total_net_usd: Decimal = Decimal("0")
    total_net_sar: Decimal = Decimal("0")
    product_net_totals: dict[str, Decimal] = field(default_factory=dict)


@dataclass
class ProcessingContext:
    """
    Holds all intermediate state during quote processing.
    This is the "bag" that flows through the pipeline.
    """

    # Input (immutable during processing)
    config: DealConfiguration

    # Step results (populated as we go)
    resolution: Year1Resolution = field(default_factory=Year1Resolution)
    floors: FloorAdjustment = field(default_factory=FloorAdjustment)
    schedules: dict[str, list[Decimal]] = field(default_factory=dict)
    aggregate: AggregateTotals = field(default_factory=AggregateTotals)
    metrics: MetricsSplit = field(default_factory=MetricsSplit)


@dataclass(frozen=True)
class CalculationOutput:
    """Final output of a schedule computation."""

    yearly_results: tuple[YearResult, ...]
    total_gross_usd: Decimal  # TCV
    total_gross_sar: Decimal
    total_vat_sar: Decimal
    total_grand_total_sar: Decimal
    total_net_usd: Decimal
    total_net_sar: Decimal
    product_net_totals: dict[str, Decimal]
    acv_usd: Decimal
    net_acv: Decimal
    renewal_base_acv: Decimal
    net_renewal_base_acv: Decimal
    upsell_acv: Decimal
    net_upsell_acv: Decimal
    currency_to_display: str  # 'USD' or 'SAR'
    unmapped_transitions: tuple[str, ...] = ()
