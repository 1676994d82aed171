"""
QUOTE PRICING ENGINE
Multi-year deal schedule computation
"""

from .models import CalculationOutput, DealConfiguration
from .processor import QuoteProcessor, compute_schedule

__all__ = ['QuoteProcessor', 'compute_schedule', 'DealConfiguration', 'CalculationOutput']
