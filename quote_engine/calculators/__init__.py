"""
Calculators Package

Provides one calculator per stage of the pricing pipeline.
"""

from .aggregate import Aggregator
from .base_price import BasePriceResolver
from .floor import FloorEnforcer
from .metrics import MetricsSplitter
from .projection import MultiYearProjector

__all__ = [
    "BasePriceResolver",
    "FloorEnforcer",
    "MultiYearProjector",
    "Aggregator",
    "MetricsSplitter",
]
