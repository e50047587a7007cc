"""
MoneyFlow Ledger - Source Package

The storage and aggregation core of a personal finance tracker:
transactions, savings goals, balances and monthly rollups.

DESIGN PRINCIPLES:
1. Whole-collection snapshots in a swappable key-value store
2. Fail early, fail visibly
3. Invalid records are never persisted
4. Derived views are pure functions of stored records
"""

__version__ = "1.0.0"
__author__ = "MoneyFlow Team"
