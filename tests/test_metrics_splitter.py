"""
Unit Tests for Metrics Splitter

Tests verify ACV and the renewal-base / upsell split.
"""

from decimal import Decimal

import pytest

from quote_engine.calculators.metrics import MetricsSplitter
from quote_engine.models import (
    AggregateTotals,
    ChannelType,
    DealConfiguration,
    DealType,
    PricingMethod,
    ProcessingContext,
    Year1Resolution,
)


class TestMetricsSplitter:

    @pytest.fixture
    def splitter(self):
        return MetricsSplitter()

    def _make_context(self, total_gross, total_net, renewal_base=0, years=1,
                      deal_type=DealType.RENEWAL, channel=ChannelType.FULFILMENT):
        config = DealConfiguration(
            deal_type=deal_type,
            channel=channel,
            selected_products=("utd",),
            years=years,
            method=PricingMethod.MYFPI,
        )
        ctx = ProcessingContext(config=config)
        ctx.resolution = Year1Resolution(renewal_base_total=Decimal(str(renewal_base)))
        ctx.aggregate = AggregateTotals(
            total_gross_usd=Decimal(str(total_gross)), total_net_usd=Decimal(str(total_net))
        )
        return ctx

    def test_acv_is_tcv_over_years(self, splitter):
        ctx = self._make_context(36000, 34200, years=3, deal_type=DealType.NEW_LOGO)
        metrics = splitter.split(ctx)

        assert metrics.acv_usd == Decimal("12000")
        assert metrics.net_acv == Decimal("11400")

    def test_new_logo_has_no_split(self, splitter):
        ctx = self._make_context(12000, 11100, deal_type=DealType.NEW_LOGO)
        metrics = splitter.split(ctx)

        assert metrics.renewal_base_acv == Decimal("0")
        assert metrics.upsell_acv == Decimal("0")

    def test_upsell_is_acv_above_renewal_base(self, splitter):
        ctx = self._make_context(12000, 11400, renewal_base=10500)
        metrics = splitter.split(ctx)

        assert metrics.renewal_base_acv == Decimal("10500")
        assert metrics.upsell_acv == Decimal("1500")

    def test_upsell_is_clamped_at_zero(self, splitter):
        ctx = self._make_context(3000, 2850, renewal_base=5000)
        metrics = splitter.split(ctx)

        assert metrics.upsell_acv == Decimal("0")

    def test_net_split_uses_first_year_factor(self, splitter):
        ctx = self._make_context(
            12000, 10800, renewal_base=10000, channel=ChannelType.PARTNER_SOURCED
        )
        metrics = splitter.split(ctx)

        # Partner-sourced renewal: 0.90
        assert metrics.net_renewal_base_acv == Decimal("9000")
        assert metrics.net_upsell_acv == Decimal("1800")
