"""
Floor Enforcer

Raises year-1 net prices to the contractual minimum for the product mix.
"""

from decimal import Decimal

from ..catalog import BED_PRODUCT, PHYSICIAN_PRODUCT, short_name
from ..models import FloorAdjustment, ProcessingContext
from .currency import gross_up_wht


class FloorEnforcer:
    """Enforces price floors on year-1 nets."""

    # Floors before WHT gross-up ($6,500 / 0.95 = $6,842.11 with WHT)
    STANDARD_FLOOR_RAW = Decimal("6500")
    COMBO_FLOOR_RAW = Decimal("4000")

    def apply(self, ctx: ProcessingContext) -> FloorAdjustment:
        config = ctx.config
        return self.enforce(
            ctx.resolution.year1_nets, config.selected_products, config.apply_wht
        )

    def enforce(
        self, year1_nets: dict[str, Decimal], selected_products, apply_wht: bool
    ) -> FloorAdjustment:
        """
        Apply floors to a set of year-1 nets keyed by product.

        Floor rules:
        - Both families selected: only the per-bed product is floored, at the combo floor
        - One family selected: that product is floored at the standalone floor
        """
        nets = dict(year1_nets)
        result = FloorAdjustment(year1_nets=nets)

        standard_floor = gross_up_wht(self.STANDARD_FLOOR_RAW, apply_wht)
        combo_floor = gross_up_wht(self.COMBO_FLOOR_RAW, apply_wht)

        has_physician = PHYSICIAN_PRODUCT in selected_products
        has_bed = BED_PRODUCT in selected_products

        if has_physician and has_bed:
            self._raise_to(result, BED_PRODUCT, combo_floor, "Combo Floor")
        elif has_physician:
            self._raise_to(result, PHYSICIAN_PRODUCT, standard_floor, "Minimum Floor")
        elif has_bed:
            self._raise_to(result, BED_PRODUCT, standard_floor, "Minimum Floor")

        return result

    def _raise_to(self, result: FloorAdjustment, product_id: str, floor: Decimal, label: str) -> None:
        current = result.year1_nets.get(product_id, Decimal("0"))
        if current < floor:
            result.year1_nets[product_id] = floor
            result.notes.append(f"{short_name(product_id)} adjusted to {label}")
            result.floor_adjusted = True
