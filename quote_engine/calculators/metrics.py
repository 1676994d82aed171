"""
Metrics Splitter

Derives ACV and the renewal-base / upsell split from the aggregated totals.
"""

from decimal import Decimal

from ..models import DealType, MetricsSplit, ProcessingContext
from .aggregate import net_factor


class MetricsSplitter:
    """Calculates summary metrics for a schedule."""

    def split(self, ctx: ProcessingContext) -> MetricsSplit:
        """
        Calculate ACV and the renewal split.

        - ACV = TCV / years (gross and net)
        - Renewals: upsell = ACV - renewal base, never below zero
        - Net renewal base and net upsell use the first-year recognition factor
          for every year
        """
        config = ctx.config
        totals = ctx.aggregate
        years = Decimal(config.years)

        acv_usd = totals.total_gross_usd / years
        net_acv = totals.total_net_usd / years

        if config.deal_type != DealType.RENEWAL:
            return MetricsSplit(acv_usd=acv_usd, net_acv=net_acv)

        renewal_base = ctx.resolution.renewal_base_total
        upsell = max(Decimal("0"), acv_usd - renewal_base)
        factor = net_factor(config.deal_type, config.channel, 0)

        return MetricsSplit(
            acv_usd=acv_usd,
            net_acv=net_acv,
            renewal_base_acv=renewal_base,
            net_renewal_base_acv=renewal_base * factor,
            upsell_acv=upsell,
            net_upsell_acv=upsell * factor,
        )
