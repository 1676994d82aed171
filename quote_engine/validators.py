"""
Input Validation for the Quote Pricing Engine

The engine is total: missing prices, inputs and rate entries read as zero.
Only the preconditions that would otherwise produce a division by zero or an
empty schedule are checked here. Raises ValueError subclasses with clear
messages for any constraint violation.
"""

from decimal import Decimal

from .models import DealConfiguration


class QuoteValidationError(ValueError):
    """Base class for configuration errors the engine refuses to price."""


class InvalidDurationError(QuoteValidationError):
    pass


class InvalidRateError(QuoteValidationError):
    pass


class InputValidator:
    """Validates a deal configuration before pricing."""

    MIN_RATE = Decimal("-100")

    def validate(self, config: DealConfiguration) -> None:
        """
        Run all validations. Raises QuoteValidationError if any check fails.
        """
        self._validate_duration(config)
        self._validate_rates(config)

    def _validate_duration(self, config: DealConfiguration) -> None:
        if config.years < 1:
            raise InvalidDurationError(f"years must be at least 1, got: {config.years}")

    def _validate_rates(self, config: DealConfiguration) -> None:
        """Every rate must keep (1 + rate/100) strictly positive."""
        self._check_rate_array("rates", config.rates)

        for product_id, rates in config.product_rates.items():
            self._check_rate_array(f"product_rates[{product_id}]", rates)

        for product_id, rate in config.renewal_uplift_rates.items():
            if rate <= self.MIN_RATE:
                raise InvalidRateError(
                    f"renewal_uplift_rates[{product_id}] must be greater than -100%, got: {rate}"
                )

    def _check_rate_array(self, label: str, rates) -> None:
        for i, rate in enumerate(rates):
            if rate <= self.MIN_RATE:
                raise InvalidRateError(f"{label}[{i}] must be greater than -100%, got: {rate}")
