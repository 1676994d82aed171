"""
Multi-Year Projector

Expands each product's year-1 value into a full contract schedule.

MYFPI compounds forward from year 1; MYPP discounts backward from the final
year. Flat pricing and rounding are optional post-processing steps, applied in
that order.
"""

from decimal import Decimal
from typing import Sequence

from ..models import ChannelType, PricingMethod, ProcessingContext
from .currency import EXCHANGE_RATE_SAR, round_up

HUNDRED = Decimal("100")
USD_ROUNDING_INCREMENT = Decimal("100")
SAR_ROUNDING_INCREMENT = Decimal("1000")


def _rate(rates: Sequence[Decimal], index: int) -> Decimal:
    if 0 <= index < len(rates):
        return rates[index]
    return Decimal("0")


def project_forward(year1: Decimal, rates: Sequence[Decimal], years: int) -> list[Decimal]:
    """MYFPI: schedule[0] = year1, each later year grows by its own rate."""
    schedule = [year1]
    for i in range(1, years):
        schedule.append(schedule[i - 1] * (1 + _rate(rates, i) / HUNDRED))
    return schedule


def project_reverse(year1: Decimal, rates: Sequence[Decimal], years: int) -> list[Decimal]:
    """MYPP: schedule[-1] = year1, each earlier year is discounted by the following year's rate."""
    schedule = [Decimal("0")] * years
    schedule[years - 1] = year1
    for i in range(years - 2, -1, -1):
        schedule[i] = schedule[i + 1] / (1 + _rate(rates, i + 1) / HUNDRED)
    return schedule


def flatten(schedule: list[Decimal]) -> list[Decimal]:
    """Replace every year with the schedule's mean; the total is unchanged."""
    if not schedule:
        return schedule
    average = sum(schedule, Decimal("0")) / len(schedule)
    return [average] * len(schedule)


def round_schedule(schedule: list[Decimal], channel: ChannelType) -> list[Decimal]:
    """
    Round each year up to a currency-friendly amount.

    Direct: up to the next 100 USD.
    Indirect: up to the next 1,000 SAR, expressed back in USD.
    """
    if channel.is_indirect:
        return [
            round_up(value * EXCHANGE_RATE_SAR, SAR_ROUNDING_INCREMENT) / EXCHANGE_RATE_SAR
            for value in schedule
        ]
    return [round_up(value, USD_ROUNDING_INCREMENT) for value in schedule]


class MultiYearProjector:
    """Builds per-product schedules from the floored year-1 nets."""

    def project(self, ctx: ProcessingContext) -> dict[str, list[Decimal]]:
        config = ctx.config
        schedules = {}

        for product_id in config.selected_products:
            year1 = ctx.floors.year1_nets.get(product_id, Decimal("0"))
            rates = config.rates_for(product_id)

            if config.method == PricingMethod.MYFPI:
                schedule = project_forward(year1, rates, config.years)
            else:
                schedule = project_reverse(year1, rates, config.years)

            if config.flat_pricing:
                schedule = flatten(schedule)

            if config.rounding:
                schedule = round_schedule(schedule, config.channel)

            schedules[product_id] = schedule

        return schedules
