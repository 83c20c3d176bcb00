"""
Wellness Pricing Package

Pricing calculator for wellness-service events (massage/spa, hair/nails,
headshot photography). Turns event parameters into appointment counts,
revenue, cost, margin and annualized totals.
"""

__version__ = "1.0.0"
