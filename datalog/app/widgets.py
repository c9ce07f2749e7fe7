"""
Custom widgets for the datalog viewer.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QHeaderView,
    QLineEdit,
    QPushButton,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ..core import Log, filter_channel_indices


class ChannelSelector(QWidget):
    """Widget for selecting the channels of a log, grouped by unit."""

    channels_selected = Signal(list)  # List of channel positions

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._log: Optional[Log] = None
        self._selected: list[int] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search channels...")
        self.search_edit.textChanged.connect(self._rebuild_tree)
        layout.addWidget(self.search_edit)

        self.tree = QTreeWidget()
        self.tree.setHeaderLabels(["Channel", "Samples"])
        self.tree.setSelectionMode(QTreeWidget.SelectionMode.NoSelection)
        self.tree.header().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.tree.header().setStretchLastSection(False)
        self.tree.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self.tree)

        actions_layout = QHBoxLayout()
        select_all_btn = QPushButton("Select All")
        select_all_btn.clicked.connect(self._select_all)
        actions_layout.addWidget(select_all_btn)

        clear_btn = QPushButton("Clear")
        clear_btn.clicked.connect(self._clear_selection)
        actions_layout.addWidget(clear_btn)

        layout.addLayout(actions_layout)

    def set_log(self, log: Optional[Log]) -> None:
        """Show the channels of a log."""
        self._log = log
        self._selected = []
        self._rebuild_tree()

    def get_selected_channels(self) -> list[int]:
        """Get the positions of the checked channels in selection order."""
        return list(self._selected)

    def _visible_channels(self) -> list[int]:
        if self._log is None:
            return []
        return filter_channel_indices(self._log, self.search_edit.text())

    def _rebuild_tree(self):
        self.tree.blockSignals(True)
        self.tree.clear()

        if self._log is not None:
            visible = set(self._visible_channels())
            unit_items: dict[str, QTreeWidgetItem] = {}

            for index, channel in enumerate(self._log.channels):
                if index not in visible:
                    continue

                unit_label = f"[{channel.units}]" if channel.units else "[No Unit]"
                unit_item = unit_items.get(unit_label)
                if unit_item is None:
                    unit_item = QTreeWidgetItem([unit_label, ""])
                    unit_item.setFlags(unit_item.flags() & ~Qt.ItemFlag.ItemIsSelectable)
                    self.tree.addTopLevelItem(unit_item)
                    unit_item.setExpanded(True)
                    unit_items[unit_label] = unit_item

                ch_item = QTreeWidgetItem([channel.name, str(channel.sample_count)])
                ch_item.setData(0, Qt.ItemDataRole.UserRole, index)
                ch_item.setFlags(ch_item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
                ch_item.setCheckState(
                    0,
                    Qt.CheckState.Checked if index in self._selected else Qt.CheckState.Unchecked
                )
                unit_item.addChild(ch_item)

        self.tree.blockSignals(False)

    def _on_item_changed(self, item: QTreeWidgetItem, column: int):
        index = item.data(0, Qt.ItemDataRole.UserRole)
        if index is None:
            return

        if item.checkState(0) == Qt.CheckState.Checked:
            if index not in self._selected:
                self._selected.append(index)
        elif index in self._selected:
            self._selected.remove(index)

        self.channels_selected.emit(self.get_selected_channels())

    def _select_all(self):
        self._selected = self._visible_channels()
        self._rebuild_tree()
        self.channels_selected.emit(self.get_selected_channels())

    def _clear_selection(self):
        self._selected = []
        self._rebuild_tree()
        self.channels_selected.emit([])
