# -*- coding: utf-8 -*-
"""
Core package — Clean Architecture layers for the Take-off Wizard.

Structure:
    core/domain/          — Domain models (pure Python, no Qt)
    core/capture_engine/  — Tracing state machine (pure Python, no Qt)
    core/ledger/          — In-memory take-off ledger + SQLite repository
    core/application/     — Use cases and background persistence
"""
