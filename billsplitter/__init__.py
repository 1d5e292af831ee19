"""
Bill Splitter - Source Package

The multi-currency bill-splitting and analytics engine behind the
bill splitter app.

DESIGN PRINCIPLES:
1. Pure computation over immutable bill snapshots
2. Currency data is injected, never ambient
3. Money is Decimal, rounded to cents at every boundary
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Bill Splitter Team"
