"""
Weekplan: deterministic weekly time allocation.
"""

__version__ = "0.1.0"
