"""
Wealth Dashboard - Source Package

A personal-finance dashboard for households: accounts, categories,
investments, transactions, budgets and reports.

DESIGN PRINCIPLES:
1. Every mutation returns a result, never an exception
2. Storage layer is swappable
3. Cached views are invalidated from one central table
4. Every mutation is auditable
"""

__version__ = "1.0.0"
__author__ = "Wealth Dashboard Team"
