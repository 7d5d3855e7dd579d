# -*- coding: utf-8 -*-
"""
Ledger package — take-off aggregation and its persistence boundary.

Public API:
    TakeoffLedger      — in-memory source of truth for take-offs
    TakeoffRepository  — context-managed access to the take-off database
"""

from .ledger import TakeoffLedger
from .repository import TakeoffRepository

__all__ = ["TakeoffLedger", "TakeoffRepository"]
