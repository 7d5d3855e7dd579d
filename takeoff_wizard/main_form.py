# -*- coding: utf-8 -*-
"""
Primary/Root form for the Take-off Wizard.
Provides the drawing canvas with the tracing tools, a tree of take-offs and
their measurements, the scale field, and the take-off actions (new, delete,
lock, clear all, save).

Errors raised by the executor and its use cases are caught here and shown in
a QMessageBox; nothing below this layer talks to the operator directly.
"""

import os
import sys

from PyQt5.QtWidgets import (
    QApplication, QDialog, QVBoxLayout, QHBoxLayout, QPushButton, QTextEdit,
    QInputDialog, QMessageBox, QTreeWidget, QTreeWidgetItem, QMenu, QLabel,
    QLineEdit, QButtonGroup, QFileDialog, QGroupBox
)
from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtGui import QFont, QPixmap

from .core.capture_engine import Tool
from .core.domain.models.measurement_kind import MeasurementKind
from .map_tools import TakeoffCanvasView
from .takeoff_executor import TakeoffExecutor
from .takeoff_store import default_data_dir

# Custom data roles
ROLE_ID   = Qt.UserRole
ROLE_TYPE = Qt.UserRole + 1

TOOL_LABELS = [
    (Tool.POINTER, "Select"),
    (Tool.AREA,    "Area"),
    (Tool.LINEAR,  "Linear"),
    (Tool.COUNT,   "Count"),
]

DRAWING_FILTER = "Drawings (*.png *.jpg *.jpeg *.bmp *.tif *.tiff);;All files (*)"


# ---------------------------------------------------------------------------
#  TakeoffTreeModel
# ---------------------------------------------------------------------------

class TakeoffTreeModel:
    """Builds the 2-level tree: Take-off → Measurement."""

    @staticmethod
    def populate_tree(tree_widget, ledger, selected_type=None, selected_id=None):
        """Populate tree_widget from the ledger.

        Returns:
            QTreeWidgetItem or None: item that should be re-selected
        """
        bold_font = QFont()
        bold_font.setBold(True)

        item_to_select = None

        for takeoff in ledger.takeoffs():
            t_item = QTreeWidgetItem(tree_widget)
            name = f"\U0001F512 {takeoff.name}" if takeoff.locked else takeoff.name
            t_item.setText(0, name)
            t_item.setText(1, takeoff.quantity)
            t_item.setText(2, takeoff.unit)
            t_item.setText(3, takeoff.status.value)
            t_item.setFont(0, bold_font)
            t_item.setData(0, ROLE_ID, takeoff.id)
            t_item.setData(0, ROLE_TYPE, 'takeoff')
            t_item.setFlags(Qt.ItemIsEnabled | Qt.ItemIsSelectable)

            if selected_type == 'takeoff' and selected_id == takeoff.id:
                item_to_select = t_item

            for m in takeoff.measurements:
                m_item = QTreeWidgetItem(t_item)
                m_item.setText(0, m.label)
                m_item.setText(1, f"{m.value:.2f}" if takeoff.kind is not MeasurementKind.COUNT
                               else str(int(m.value)))
                m_item.setText(2, m.unit)
                m_item.setData(0, ROLE_ID, m.id)
                m_item.setData(0, ROLE_TYPE, 'measurement')
                m_item.setFlags(Qt.ItemIsEnabled | Qt.ItemIsSelectable)
                if selected_type == 'measurement' and selected_id == m.id:
                    item_to_select = m_item

            t_item.setExpanded(True)

        return item_to_select


# ---------------------------------------------------------------------------
#  TakeoffMainForm
# ---------------------------------------------------------------------------

class TakeoffMainForm(QDialog):
    """Main form: drawing canvas plus the take-off list."""

    def __init__(self, data_dir=None, parent=None, load=True):
        super().__init__(parent)
        self.data_dir = data_dir or default_data_dir()
        self.drawing_name = ''

        self.executor = TakeoffExecutor(data_dir=self.data_dir, parent=self)
        self.executor.takeoffs_changed.connect(self._populate_tree)
        self.executor.save_failed.connect(self._on_save_failed)
        self.executor.operation_failed.connect(self._on_operation_failed)

        self.setWindowTitle("Take-off Wizard")
        self.resize(1200, 800)

        layout = QVBoxLayout(self)

        # Tools row
        tool_layout = QHBoxLayout()

        self.btn_open = QPushButton("Open Drawing...")
        self.btn_open.clicked.connect(self._on_open_drawing)
        tool_layout.addWidget(self.btn_open)

        self.tool_group = QButtonGroup(self)
        self.tool_group.setExclusive(True)
        self.tool_buttons = {}
        for tool, label in TOOL_LABELS:
            btn = QPushButton(label)
            btn.setCheckable(True)
            btn.clicked.connect(lambda checked, t=tool: self._on_tool_selected(t))
            self.tool_group.addButton(btn)
            self.tool_buttons[tool] = btn
            tool_layout.addWidget(btn)
        self.tool_buttons[Tool.POINTER].setChecked(True)

        tool_layout.addStretch()
        tool_layout.addWidget(QLabel("Scale (px per m):"))
        self.scale_edit = QLineEdit(self._format_scale(self.executor.scale))
        self.scale_edit.setMaximumWidth(80)
        self.scale_edit.editingFinished.connect(self._on_scale_edited)
        tool_layout.addWidget(self.scale_edit)
        layout.addLayout(tool_layout)

        # Canvas + take-off panel
        body = QHBoxLayout()
        self.canvas = TakeoffCanvasView(self.executor)
        self.canvas.shape_pending.connect(self._on_shape_pending)
        self.canvas.cancelled.connect(self._on_capture_cancelled)
        body.addWidget(self.canvas, 3)

        panel = QGroupBox("Take-offs")
        panel_layout = QVBoxLayout(panel)

        self.summary_label = QLabel()
        panel_layout.addWidget(self.summary_label)

        self.tree = QTreeWidget()
        self.tree.setHeaderLabels(["Name", "Quantity", "Unit", "Status"])
        self.tree.setContextMenuPolicy(Qt.CustomContextMenu)
        self.tree.customContextMenuRequested.connect(self._on_context_menu)
        self.tree.currentItemChanged.connect(self._on_tree_selection_changed)
        panel_layout.addWidget(self.tree, 1)

        btn_layout = QHBoxLayout()
        self.btn_new_takeoff = QPushButton("New Take-off")
        self.btn_new_takeoff.clicked.connect(self._on_new_takeoff)
        btn_layout.addWidget(self.btn_new_takeoff)

        self.btn_delete = QPushButton("Delete")
        self.btn_delete.setEnabled(False)
        self.btn_delete.clicked.connect(self._on_delete_selected)
        btn_layout.addWidget(self.btn_delete)

        self.btn_lock = QPushButton("Lock")
        self.btn_lock.setEnabled(False)
        self.btn_lock.clicked.connect(self._on_toggle_lock)
        btn_layout.addWidget(self.btn_lock)
        panel_layout.addLayout(btn_layout)

        btn_layout = QHBoxLayout()
        self.btn_clear = QPushButton("Clear All")
        self.btn_clear.clicked.connect(self._on_clear_all)
        btn_layout.addWidget(self.btn_clear)

        self.btn_save = QPushButton("Save")
        self.btn_save.clicked.connect(self._on_save)
        btn_layout.addWidget(self.btn_save)
        panel_layout.addLayout(btn_layout)

        panel_layout.addWidget(QLabel("Details:"))
        self.details_text_edit = QTextEdit()
        self.details_text_edit.setReadOnly(True)
        self.details_text_edit.setMaximumHeight(120)
        panel_layout.addWidget(self.details_text_edit)

        body.addWidget(panel, 2)
        layout.addLayout(body, 1)

        if load:
            self._load_takeoffs()
        self._populate_tree()

    # ------------------------------------------------------------------ #
    #  Loading
    # ------------------------------------------------------------------ #

    def _load_takeoffs(self):
        try:
            self.executor.load()
        except (RuntimeError, ValueError) as e:
            print(f"Warning: Could not load take-offs: {e}")
            QMessageBox.warning(self, "Load Failed", str(e))
            return
        self.scale_edit.setText(self._format_scale(self.executor.scale))

    # ------------------------------------------------------------------ #
    #  Tree population
    # ------------------------------------------------------------------ #

    def _populate_tree(self):
        """Rebuild the tree from the ledger, preserving the selection."""
        current = self.tree.currentItem()
        selected_type = current.data(0, ROLE_TYPE) if current else None
        selected_id = current.data(0, ROLE_ID) if current else None

        self.tree.blockSignals(True)
        self.tree.clear()
        item_to_select = TakeoffTreeModel.populate_tree(
            self.tree, self.executor.ledger,
            selected_type=selected_type, selected_id=selected_id
        )
        self.tree.blockSignals(False)

        if item_to_select:
            self.tree.setCurrentItem(item_to_select)
        else:
            self._on_tree_selection_changed(None, None)

        s = self.executor.summary()
        self.summary_label.setText(
            f"Total: {s['total']}   Complete: {s['complete']}   "
            f"Pending: {s['pending']}   Locked: {s['locked']}"
        )

    def _selected_takeoff_id(self):
        """Take-off id of the selected node (a measurement selects its owner)."""
        current = self.tree.currentItem()
        if current is None:
            return None
        if current.data(0, ROLE_TYPE) == 'measurement':
            current = current.parent()
        return current.data(0, ROLE_ID) if current else None

    def _on_tree_selection_changed(self, current, previous):
        if current is None:
            self.btn_delete.setEnabled(False)
            self.btn_lock.setEnabled(False)
            self.details_text_edit.clear()
            return

        node_type = current.data(0, ROLE_TYPE)
        takeoff = self.executor.ledger.get_takeoff(self._selected_takeoff_id())
        self.btn_delete.setEnabled(not takeoff.locked)
        self.btn_lock.setEnabled(True)
        self.btn_lock.setText("Unlock" if takeoff.locked else "Lock")

        if node_type == 'takeoff':
            self.details_text_edit.setPlainText(
                f"Take-off: {takeoff.name}\n"
                f"Kind: {takeoff.kind.value}\n"
                f"Quantity: {takeoff.quantity} {takeoff.unit}\n"
                f"Measurements: {len(takeoff.measurements)}\n"
                f"WBS element: {takeoff.wbs_element or '-'}\n"
                f"Drawing: {takeoff.drawing or '-'}"
            )
        else:
            m = self.executor.ledger.find_measurement(current.data(0, ROLE_ID))
            if m is not None:
                self.details_text_edit.setPlainText(
                    f"Measurement: {m.label}\n"
                    f"Value: {m.value} {m.unit}\n"
                    f"Scale: {m.scale:g} px per unit\n"
                    f"Captured: {m.created_at}"
                )

    # ------------------------------------------------------------------ #
    #  Tools and scale
    # ------------------------------------------------------------------ #

    def _on_tool_selected(self, tool):
        self.executor.select_tool(tool)
        self.canvas.update_cursor()
        self.canvas.setFocus()

    def _on_scale_edited(self):
        text = self.scale_edit.text()
        if text == self._format_scale(self.executor.scale):
            return
        try:
            self.executor.set_scale(text)
        except ValueError as e:
            QMessageBox.warning(self, "Invalid Scale", str(e))
            self.scale_edit.setText(self._format_scale(self.executor.scale))

    @staticmethod
    def _format_scale(value):
        return f"{value:g}"

    def _on_open_drawing(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open Drawing", "", DRAWING_FILTER)
        if not path:
            return
        pixmap = QPixmap(path)
        if pixmap.isNull():
            QMessageBox.warning(self, "Open Drawing", f"Could not read drawing:\n{path}")
            return
        self.executor.set_document(pixmap)
        self.drawing_name = os.path.basename(path)
        self.setWindowTitle(f"Take-off Wizard - {self.drawing_name}")

    # ------------------------------------------------------------------ #
    #  Pending shape
    # ------------------------------------------------------------------ #

    def _on_shape_pending(self, shape):
        # Prompt after the mouse event has returned
        QTimer.singleShot(0, self._prompt_pending)

    def _on_capture_cancelled(self):
        self.details_text_edit.setPlainText("Measurement discarded.")

    def _prompt_pending(self):
        """Ask for the target take-off and a label, then attach the shape."""
        shape = self.executor.pending
        if shape is None:
            return

        takeoff_id = self._choose_takeoff(shape)
        if takeoff_id is None:
            self.executor.cancel_pending()
            return

        text = f"{shape.value} {shape.unit}"
        while True:
            label, ok = QInputDialog.getText(
                self, "Name Measurement", f"Measurement ({text}):"
            )
            if not ok:
                self.executor.cancel_pending()
                return
            try:
                self.executor.confirm_pending(takeoff_id, label)
                return
            except ValueError as e:
                QMessageBox.warning(self, "Measurement", str(e))
            except RuntimeError as e:
                QMessageBox.warning(self, "Measurement", str(e))
                return

    def _choose_takeoff(self, shape):
        """Return the id of the take-off receiving the shape, or None."""
        candidates = self.executor.compatible_takeoffs(shape.kind)
        if not candidates:
            name, ok = QInputDialog.getText(
                self, "New Take-off",
                f"No open {shape.kind.value} take-off. Take-off name:"
            )
            if not ok:
                return None
            try:
                result = self.executor.create_takeoff(
                    name, shape.kind, drawing=self.drawing_name
                )
            except ValueError as e:
                QMessageBox.warning(self, "New Take-off", str(e))
                return None
            return result['takeoff_id']

        selected = self._selected_takeoff_id()
        for takeoff in candidates:
            if takeoff.id == selected:
                return takeoff.id
        if len(candidates) == 1:
            return candidates[0].id

        names = [t.name for t in candidates]
        name, ok = QInputDialog.getItem(
            self, "Take-off", "Add measurement to:", names, 0, False
        )
        if not ok:
            return None
        return candidates[names.index(name)].id

    # ------------------------------------------------------------------ #
    #  Context menu
    # ------------------------------------------------------------------ #

    def _on_context_menu(self, position):
        item = self.tree.itemAt(position)
        menu = QMenu(self)

        if item is None:
            act = menu.addAction("New Take-off")
            act.triggered.connect(self._on_new_takeoff)
        else:
            node_type = item.data(0, ROLE_TYPE) or ''
            if node_type == 'takeoff':
                act = menu.addAction("Lock / Unlock")
                act.triggered.connect(lambda: self._toggle_lock(item.data(0, ROLE_ID)))
                menu.addSeparator()
                act = menu.addAction("Delete Take-off")
                act.triggered.connect(lambda: self._on_delete_takeoff(item))
            elif node_type == 'measurement':
                act = menu.addAction("Delete Measurement")
                act.triggered.connect(lambda: self._on_delete_measurement(item))

        menu.exec_(self.tree.viewport().mapToGlobal(position))

    # ------------------------------------------------------------------ #
    #  CRUD actions
    # ------------------------------------------------------------------ #

    def _on_new_takeoff(self):
        """Ask for a name and a kind, then create an empty take-off."""
        name, ok = QInputDialog.getText(self, "New Take-off", "Take-off name:")
        if not ok:
            return
        kinds = [k.value for k in MeasurementKind]
        kind, ok = QInputDialog.getItem(self, "New Take-off", "Measure:", kinds, 0, False)
        if not ok:
            return
        wbs, ok = QInputDialog.getText(self, "New Take-off", "WBS element (optional):")
        try:
            self.executor.create_takeoff(
                name, kind, wbs_element=wbs if ok else '', drawing=self.drawing_name
            )
        except ValueError as e:
            QMessageBox.warning(self, "New Take-off", str(e))

    def _on_delete_selected(self):
        current = self.tree.currentItem()
        if current is None:
            return
        if current.data(0, ROLE_TYPE) == 'measurement':
            self._on_delete_measurement(current)
        else:
            self._on_delete_takeoff(current)

    def _on_delete_takeoff(self, item):
        """Delete a take-off and all of its measurements after confirmation."""
        takeoff_id = item.data(0, ROLE_ID)
        takeoff = self.executor.ledger.get_takeoff(takeoff_id)
        reply = QMessageBox.question(
            self, "Delete Take-off",
            f"Delete take-off '{takeoff.name}' and its "
            f"{len(takeoff.measurements)} measurement(s)?",
            QMessageBox.Yes | QMessageBox.No, QMessageBox.No
        )
        if reply != QMessageBox.Yes:
            return
        try:
            self.executor.delete_takeoff(takeoff_id)
        except (KeyError, ValueError) as e:
            QMessageBox.warning(self, "Delete Take-off", str(e).strip("'\""))

    def _on_delete_measurement(self, item):
        try:
            self.executor.delete_measurement(item.data(0, ROLE_ID))
        except (KeyError, ValueError) as e:
            QMessageBox.warning(self, "Delete Measurement", str(e).strip("'\""))

    def _on_toggle_lock(self):
        takeoff_id = self._selected_takeoff_id()
        if takeoff_id:
            self._toggle_lock(takeoff_id)

    def _toggle_lock(self, takeoff_id):
        takeoff = self.executor.ledger.get_takeoff(takeoff_id)
        self.executor.set_locked(takeoff_id, not takeoff.locked)

    def _on_clear_all(self):
        reply = QMessageBox.question(
            self, "Clear All",
            "Remove every measurement from unlocked take-offs?",
            QMessageBox.Yes | QMessageBox.No, QMessageBox.No
        )
        if reply != QMessageBox.Yes:
            return
        result = self.executor.clear_measurements()
        if result['skipped']:
            self.details_text_edit.setPlainText(
                f"Cleared {len(result['removed'])} measurement(s). "
                f"{len(result['skipped'])} locked take-off(s) kept."
            )

    def _on_save(self):
        result = self.executor.save()
        self.details_text_edit.setPlainText(
            f"Saving {len(result['takeoff_ids'])} take-off(s)..."
        )

    # ------------------------------------------------------------------ #
    #  Notifications
    # ------------------------------------------------------------------ #

    def _on_save_failed(self, message):
        QMessageBox.warning(self, "Save Failed", message)

    def _on_operation_failed(self, message):
        QMessageBox.warning(self, "Take-off Wizard", message)

    # ------------------------------------------------------------------ #
    #  Lifecycle
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        """Wait for queued saves before closing."""
        self.executor.shutdown(wait=True)
        super().closeEvent(event)


def main():
    """Console entry point: open the take-off form."""
    app = QApplication.instance() or QApplication(sys.argv)
    form = TakeoffMainForm()
    form.show()
    sys.exit(app.exec_())


if __name__ == '__main__':
    main()
