"""
Schedule Aggregator

Sums per-product schedules into per-year and contract totals, converts to SAR,
adds VAT for indirect channels, and applies the revenue recognition factor.
"""

from decimal import Decimal

from ..models import AggregateTotals, ChannelType, DealType, ProcessingContext, ProductYearlyData, YearResult
from .currency import VAT_RATE, convert_to_sar, usd_to_sar

# (first contract year, later years) share retained after reseller margin
RECOGNITION_FACTORS: dict[tuple[ChannelType, DealType], tuple[Decimal, Decimal]] = {
    (ChannelType.FULFILMENT, DealType.NEW_LOGO): (Decimal("0.925"), Decimal("0.95")),
    (ChannelType.FULFILMENT, DealType.RENEWAL): (Decimal("0.95"), Decimal("0.95")),
    (ChannelType.PARTNER_SOURCED, DealType.NEW_LOGO): (Decimal("0.85"), Decimal("0.90")),
    (ChannelType.PARTNER_SOURCED, DealType.RENEWAL): (Decimal("0.90"), Decimal("0.90")),
}


def net_factor(deal_type: DealType, channel: ChannelType, year_index: int) -> Decimal:
    """Recognized share of gross revenue for a contract year (0-based)."""
    factors = RECOGNITION_FACTORS.get((channel, deal_type))
    if factors is None:
        return Decimal("1")
    first_year, later_years = factors
    return first_year if year_index == 0 else later_years


class Aggregator:
    """Combines product schedules into the yearly results and grand totals."""

    def aggregate(self, ctx: ProcessingContext) -> AggregateTotals:
        config = ctx.config
        totals = AggregateTotals(
            product_net_totals={pid: Decimal("0") for pid in config.selected_products}
        )

        for i in range(config.years):
            factor = net_factor(config.deal_type, config.channel, i)
            breakdown = []
            year_gross_usd = Decimal("0")

            for product_id in config.selected_products:
                value = ctx.schedules[product_id][i]
                net_value = value * factor
                year_gross_usd += value
                breakdown.append(
                    ProductYearlyData(
                        id=product_id,
                        gross=value,
                        gross_sar=convert_to_sar(value),
                        net=net_value,
                    )
                )
                totals.product_net_totals[product_id] += net_value

            year = self._build_year(ctx, i, breakdown, year_gross_usd, factor)
            totals.yearly_results.append(year)

            totals.total_gross_usd += year.gross_usd
            totals.total_gross_sar += year.gross_sar
            totals.total_vat_sar += year.vat_sar
            totals.total_grand_total_sar += year.grand_total_sar
            totals.total_net_usd += year.net_usd
            totals.total_net_sar += year.net_sar

        return totals

    def _build_year(
        self,
        ctx: ProcessingContext,
        index: int,
        breakdown: list[ProductYearlyData],
        gross_usd: Decimal,
        factor: Decimal,
    ) -> YearResult:
        """Year totals. VAT applies to indirect channels only."""
        channel = ctx.config.channel
        gross_sar = convert_to_sar(gross_usd)
        vat_sar = gross_sar * VAT_RATE if channel.is_indirect else Decimal("0")
        recognized_usd = gross_usd * factor
        is_first_year = index == 0

        return YearResult(
            year=index + 1,
            breakdown=tuple(breakdown),
            gross_usd=gross_usd,
            gross_sar=gross_sar,
            vat_sar=vat_sar,
            grand_total_sar=gross_sar + vat_sar,
            net_usd=recognized_usd,
            net_sar=usd_to_sar(recognized_usd),
            floor_adjusted=is_first_year and ctx.floors.floor_adjusted,
            notes=tuple(ctx.resolution.notes + ctx.floors.notes) if is_first_year else (),
        )
