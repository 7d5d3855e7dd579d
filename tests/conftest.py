# -*- coding: utf-8 -*-
"""Shared fixtures: offscreen Qt application and a temporary data directory."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / "takeoff_data")
