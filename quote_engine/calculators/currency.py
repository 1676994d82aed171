"""
Currency and Tax Helpers

Withholding-tax gross-up and USD -> SAR conversion shared by the calculators.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

WHT_FACTOR = Decimal("0.95")
EXCHANGE_RATE_SAR = Decimal("3.76")
VAT_RATE = Decimal("0.15")

# Finer than any real amount; only absorbs Decimal division residue
SAR_SETTLEMENT_PRECISION = Decimal("1e-9")


def round_up(value: Decimal, increment: Decimal) -> Decimal:
    """Round up to the next multiple of increment."""
    return (value / increment).to_integral_value(rounding=ROUND_CEILING) * increment


def gross_up_wht(amount: Decimal, apply_wht: bool) -> Decimal:
    """Gross up so that the intended amount is received after 5% withholding."""
    if not apply_wht:
        return amount
    return amount / WHT_FACTOR


def usd_to_sar(usd: Decimal) -> Decimal:
    """Straight conversion, no rounding."""
    return usd * EXCHANGE_RATE_SAR


def convert_to_sar(usd: Decimal) -> Decimal:
    """
    Convert USD to SAR rounded up to the nearest 10 SAR.

    The raw SAR amount is settled to SAR_SETTLEMENT_PRECISION before rounding
    up, so a value converted back from a whole SAR figure maps onto that same
    figure while any real fraction above a multiple of 10 still rounds up.
    """
    sar = usd_to_sar(usd).quantize(SAR_SETTLEMENT_PRECISION, rounding=ROUND_HALF_UP)
    return round_up(sar, Decimal("10"))
