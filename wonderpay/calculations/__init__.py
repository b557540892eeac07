"""
Capital Calculation Engine

Pure loan-pricing routines used by the Capital API.
"""

from wonderpay.calculations import amortization

__all__ = ["amortization"]
