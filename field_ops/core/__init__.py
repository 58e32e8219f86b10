"""
Core business rules with no storage or HTTP dependencies.

This module contains:
- Line item and document totals (subtotal, tax, total)
- Quote and invoice number formatting
- Clock helpers
"""

from . import clock
from . import numbering
from . import pricing

__all__ = [
    'clock',
    'numbering',
    'pricing'
]
