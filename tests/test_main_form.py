# -*- coding: utf-8 -*-
"""Smoke tests for the take-off form (no modal dialogs are opened)."""

import pytest

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeyEvent, QPixmap

from takeoff_wizard import main_form
from takeoff_wizard.core.capture_engine import Tool


class SilentMessageBox:
    """Replaces QMessageBox so validation messages do not block the test."""

    warnings = []

    @classmethod
    def warning(cls, parent, title, text):
        cls.warnings.append((title, text))


@pytest.fixture
def form(qapp, data_dir, monkeypatch):
    SilentMessageBox.warnings = []
    monkeypatch.setattr(main_form, "QMessageBox", SilentMessageBox)
    form = main_form.TakeoffMainForm(data_dir=data_dir)
    yield form
    form.executor.shutdown(wait=True)


def test_tree_follows_ledger(form):
    result = form.executor.create_takeoff("Slab", "area")
    assert form.tree.topLevelItemCount() == 1
    item = form.tree.topLevelItem(0)
    assert item.text(0) == "Slab"
    assert item.text(1) == "0.00"
    assert item.text(3) == "pending"
    assert item.data(0, main_form.ROLE_ID) == result['takeoff_id']
    assert "Total: 1" in form.summary_label.text()


def test_invalid_scale_shows_message_and_restores(form):
    form.scale_edit.setText("abc")
    form._on_scale_edited()
    assert SilentMessageBox.warnings
    assert form.scale_edit.text() == "100"
    assert form.executor.scale == 100.0


def test_valid_scale_is_applied(form):
    form.scale_edit.setText("120")
    form._on_scale_edited()
    assert form.executor.scale == 120.0
    assert SilentMessageBox.warnings == []


def test_tool_buttons_select_tool(form):
    form.tool_buttons[Tool.AREA].click()
    assert form.executor.tool is Tool.AREA
    form.tool_buttons[Tool.POINTER].click()
    assert form.executor.tool is Tool.POINTER


def test_escape_discards_trace_and_reports_it(form):
    form.executor.set_document(QPixmap(400, 300))
    form.tool_buttons[Tool.AREA].click()
    form.executor.pointer_down(10, 10)
    assert form.executor.scene.has_trace()

    form.canvas.keyPressEvent(QKeyEvent(QKeyEvent.KeyPress, Qt.Key_Escape, Qt.NoModifier))
    assert not form.executor.scene.has_trace()
    assert form.details_text_edit.toPlainText() == "Measurement discarded."
