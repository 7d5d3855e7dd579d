# -*- coding: utf-8 -*-
"""
Take-off Wizard — on-screen quantity take-off over construction drawings.

Trace areas, lengths and counts on a drawing page, group them into named
take-offs and keep the totals in a local SQLite database.
"""

__version__ = "0.1.0"
