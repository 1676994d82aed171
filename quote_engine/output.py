"""
Output Builder

Constructs the JSON-ready response from a CalculationOutput, including the
display-only figures the UI and export layers show next to the schedule.
"""

from decimal import Decimal

from .catalog import PHYSICIAN_PRODUCT, PhysicianVariant, get_product, short_name
from .models import CalculationOutput, DealConfiguration, DealType, YearResult


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def _fmt(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"${value:,.2f}"


class OutputBuilder:
    """Builds the final output response."""

    ENTERPRISE_APPROVAL_THRESHOLD = Decimal("50000")

    def build(self, output: CalculationOutput, config: DealConfiguration) -> dict:
        """Construct the complete quote response."""
        return {
            "deal_summary": self._build_deal_summary(config, output),
            "yearly_results": [self._build_year(year) for year in output.yearly_results],
            "totals": self._build_totals(output),
            "product_net_totals": {
                pid: to_money(value) for pid, value in output.product_net_totals.items()
            },
            "metrics": self._build_metrics(output, config),
            "unit_economics": self._build_unit_economics(output, config),
            "warnings": self._build_warnings(output, config),
            "unmapped_transitions": list(output.unmapped_transitions),
            "currency_to_display": output.currency_to_display,
        }

    def _build_deal_summary(self, config: DealConfiguration, output: CalculationOutput) -> dict:
        return {
            "deal_type": config.deal_type.value,
            "channel": config.channel.value,
            "method": config.method.value,
            "years": config.years,
            "products": [self._build_product_summary(config, pid) for pid in config.selected_products],
            "apply_wht": config.apply_wht,
            "flat_pricing": config.flat_pricing,
            "rounding": config.rounding,
            "currency_to_display": output.currency_to_display,
        }

    def _build_product_summary(self, config: DealConfiguration, product_id: str) -> dict:
        """
        Product line of the deal summary.

        Renewals also echo the expiring contract: its variant, its count and
        the usage figure (expiring amount per DPH, 0 when either is missing).
        """
        inputs = config.input_for(product_id)
        summary = {
            "id": product_id,
            "name": short_name(product_id),
            "variant": inputs.variant,
            "count": inputs.count,
        }
        if config.deal_type != DealType.RENEWAL:
            return summary

        usage = Decimal("0")
        if inputs.dph > 0 and inputs.expiring_amount > 0:
            usage = inputs.expiring_amount / inputs.dph

        summary.update(
            {
                "existing_variant": inputs.renewing_from,
                "existing_count": inputs.existing_count if inputs.existing_count is not None else inputs.count,
                "expiring_amount": to_money(inputs.expiring_amount),
                "usage": to_money(usage),
            }
        )
        return summary

    def _build_year(self, year: YearResult) -> dict:
        return {
            "year": year.year,
            "breakdown": [
                {
                    "id": item.id,
                    "gross": to_money(item.gross),
                    "gross_sar": to_money(item.gross_sar),
                    "net": to_money(item.net),
                }
                for item in year.breakdown
            ],
            "gross_usd": to_money(year.gross_usd),
            "gross_sar": to_money(year.gross_sar),
            "vat_sar": to_money(year.vat_sar),
            "grand_total_sar": to_money(year.grand_total_sar),
            "net_usd": to_money(year.net_usd),
            "net_sar": to_money(year.net_sar),
            "floor_adjusted": year.floor_adjusted,
            "notes": list(year.notes),
        }

    def _build_totals(self, output: CalculationOutput) -> dict:
        return {
            "total_gross_usd": to_money(output.total_gross_usd),
            "total_gross_sar": to_money(output.total_gross_sar),
            "total_vat_sar": to_money(output.total_vat_sar),
            "total_grand_total_sar": to_money(output.total_grand_total_sar),
            "total_net_usd": to_money(output.total_net_usd),
            "total_net_sar": to_money(output.total_net_sar),
        }

    def _build_metrics(self, output: CalculationOutput, config: DealConfiguration) -> dict:
        """Build metrics section with value and description for each field."""
        years = config.years
        tcv = to_money(output.total_gross_usd)
        acv = to_money(output.acv_usd)
        renewal_base = to_money(output.renewal_base_acv)
        is_renewal = config.deal_type == DealType.RENEWAL

        return {
            "acv_usd": {
                "value": acv,
                "description": f"TCV ({_fmt(tcv)}) / {years} years = {_fmt(acv)}",
            },
            "net_acv": {
                "value": to_money(output.net_acv),
                "description": f"Recognized revenue ({_fmt(to_money(output.total_net_usd))}) / {years} years",
            },
            "renewal_base_acv": {
                "value": renewal_base,
                "description": "Expiring amount uplifted by the renewal rate, summed across products"
                if is_renewal else "Not applicable for new logo deals",
            },
            "net_renewal_base_acv": {
                "value": to_money(output.net_renewal_base_acv),
                "description": "Renewal base at the first-year recognition factor",
            },
            "upsell_acv": {
                "value": to_money(output.upsell_acv),
                "description": f"max(0, ACV ({_fmt(acv)}) - renewal base ({_fmt(renewal_base)}))"
                if is_renewal else "Not applicable for new logo deals",
            },
            "net_upsell_acv": {
                "value": to_money(output.net_upsell_acv),
                "description": "Upsell at the first-year recognition factor",
            },
        }

    def _build_unit_economics(self, output: CalculationOutput, config: DealConfiguration) -> list[dict]:
        """Monthly cost per unit = product ACV / count / 12, in the display currency."""
        currency = output.currency_to_display
        lines = []

        for product_id in config.selected_products:
            count = config.input_for(product_id).count
            if count <= 0:
                continue

            items = [item for year in output.yearly_results for item in year.breakdown if item.id == product_id]
            if currency == "USD":
                total = sum((item.gross for item in items), Decimal("0"))
            else:
                total = sum((item.gross_sar for item in items), Decimal("0"))

            monthly = total / config.years / count / 12
            product = get_product(product_id)
            unit = product.unit_label if product else "unit"
            lines.append(
                {
                    "product_id": product_id,
                    "currency": currency,
                    "monthly_per_unit": to_money(monthly),
                    "description": f"{short_name(product_id)}: {currency} {to_money(monthly):,.2f} /mo/{unit}",
                }
            )

        return lines

    def _build_warnings(self, output: CalculationOutput, config: DealConfiguration) -> list[str]:
        warnings = []

        if config.input_for(PHYSICIAN_PRODUCT).variant == PhysicianVariant.UTDEE.value:
            gross = self._first_year_gross(output, PHYSICIAN_PRODUCT)
            if gross is not None and gross < self.ENTERPRISE_APPROVAL_THRESHOLD:
                warnings.append("UTDEE deals under $50k/year require additional approval.")

        if output.unmapped_transitions:
            warnings.append(
                "Unmapped renewal transitions priced at standard base: "
                + ", ".join(output.unmapped_transitions)
            )

        return warnings

    def _first_year_gross(self, output: CalculationOutput, product_id: str) -> Decimal | None:
        if not output.yearly_results:
            return None
        for item in output.yearly_results[0].breakdown:
            if item.id == product_id:
                return item.gross
        return None
