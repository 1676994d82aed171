"""
Quote Processor - Main Orchestrator

Coordinates the pricing pipeline through discrete, testable steps.
"""

import json
import logging
from typing import Any, Dict

from .calculators import Aggregator, BasePriceResolver, FloorEnforcer, MetricsSplitter, MultiYearProjector
from .models import CalculationOutput, ChannelType, DealConfiguration, ProcessingContext
from .output import OutputBuilder
from .validators import InputValidator

logger = logging.getLogger(__name__)


class QuoteProcessor:
    """
    Main orchestrator for quote pricing.

    Implements a clear pipeline pattern:
    1. Validate Input
    2. Build Context
    3. Resolve Year-1 Base Prices
    4. Enforce Floors
    5. Project Multi-Year Schedules
    6. Aggregate Years and Totals
    7. Split Metrics (ACV, Renewal Base, Upsell)
    8. Build Output
    """

    def __init__(self):
        self.validator = InputValidator()
        self.base_price_resolver = BasePriceResolver()
        self.floor_enforcer = FloorEnforcer()
        self.projector = MultiYearProjector()
        self.aggregator = Aggregator()
        self.metrics_splitter = MetricsSplitter()
        self.output_builder = OutputBuilder()

    def compute(self, config: DealConfiguration) -> CalculationOutput:
        """
        Compute the full schedule for a deal configuration.

        Args:
            config: Immutable DealConfiguration snapshot

        Returns:
            CalculationOutput with yearly results, totals and metrics
        """
        # Step 1: Validate
        self.validator.validate(config)

        # Step 2: Build initial context
        ctx = ProcessingContext(config=config)

        # Step 3: Year-1 nets (renewal base accumulates here)
        ctx.resolution = self.base_price_resolver.resolve(ctx)

        # Step 4: Floors
        ctx.floors = self.floor_enforcer.apply(ctx)

        # Step 5: Per-product schedules
        ctx.schedules = self.projector.project(ctx)

        # Step 6: Year and grand totals
        ctx.aggregate = self.aggregator.aggregate(ctx)

        # Step 7: ACV split
        ctx.metrics = self.metrics_splitter.split(ctx)

        logger.debug(
            "Computed %s-year %s schedule: TCV %s",
            config.years,
            config.method.name,
            ctx.aggregate.total_gross_usd,
        )

        return self._build_output(ctx)

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Compute a schedule from a raw dictionary payload.

        Convenience method for API usage.
        """
        config = DealConfiguration.from_dict(data)
        output = self.compute(config)
        return self.output_builder.build(output, config)

    def _build_output(self, ctx: ProcessingContext) -> CalculationOutput:
        totals = ctx.aggregate
        metrics = ctx.metrics
        return CalculationOutput(
            yearly_results=tuple(totals.yearly_results),
            total_gross_usd=totals.total_gross_usd,
            total_gross_sar=totals.total_gross_sar,
            total_vat_sar=totals.total_vat_sar,
            total_grand_total_sar=totals.total_grand_total_sar,
            total_net_usd=totals.total_net_usd,
            total_net_sar=totals.total_net_sar,
            product_net_totals=dict(totals.product_net_totals),
            acv_usd=metrics.acv_usd,
            net_acv=metrics.net_acv,
            renewal_base_acv=metrics.renewal_base_acv,
            net_renewal_base_acv=metrics.net_renewal_base_acv,
            upsell_acv=metrics.upsell_acv,
            net_upsell_acv=metrics.net_upsell_acv,
            currency_to_display="USD" if ctx.config.channel == ChannelType.DIRECT else "SAR",
            unmapped_transitions=tuple(ctx.resolution.unmapped_transitions),
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def compute_schedule(config: DealConfiguration) -> CalculationOutput:
    """Turn a deal configuration into its complete financial schedule."""
    return QuoteProcessor().compute(config)


def process_quote_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute a quote from a Python dict and return a Python dict.
    """
    processor = QuoteProcessor()
    return processor.process_from_dict(input_data)


def process_quote_from_json(json_input: str) -> str:
    """
    Compute a quote from a JSON string and return a JSON string.
    """
    try:
        input_data = json.loads(json_input)
        processor = QuoteProcessor()
        result = processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        logger.error("Quote processing failed: %s", e, exc_info=True)
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
