"""
Channel plot widget with crosshair and hover readout.
"""
from __future__ import annotations

from typing import Optional

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..core import Channel


# Color palette for multiple series
COLORS = [
    "#1f77b4",  # Blue
    "#ff7f0e",  # Orange
    "#2ca02c",  # Green
    "#d62728",  # Red
    "#9467bd",  # Purple
    "#8c564b",  # Brown
    "#e377c2",  # Pink
    "#7f7f7f",  # Gray
    "#bcbd22",  # Yellow-green
    "#17becf",  # Cyan
]


class CrosshairReadout(QFrame):
    """Widget displaying channel values under the crosshair."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setStyleSheet("""
            QFrame {
                background-color: rgba(40, 40, 40, 200);
                border: 1px solid #555;
                border-radius: 4px;
                padding: 4px;
            }
            QLabel {
                color: white;
                font-family: monospace;
                font-size: 11px;
            }
        """)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 4, 6, 4)
        layout.setSpacing(2)

        self.time_label = QLabel("Time: --")
        self.time_label.setFont(QFont("monospace", 10))
        layout.addWidget(self.time_label)

        self.values_label = QLabel("")
        self.values_label.setFont(QFont("monospace", 10))
        layout.addWidget(self.values_label)

        self.setVisible(False)

    def set_values(self, time_val: float, channel_values: list[tuple[str, str]]):
        """Set the readout values (already formatted)."""
        self.time_label.setText(f"Time: {time_val:.4f} s")
        lines = [f"{name}: {text}" for name, text in channel_values[:8]]
        self.values_label.setText("\n".join(lines))
        self.adjustSize()


class ChannelPlotWidget(QWidget):
    """Plots log channels against time."""

    crosshair_moved = Signal(float)  # x_value

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        # One (label, timestamps, values, units, decimals) entry per plotted channel
        self._series_data: list[tuple[str, np.ndarray, np.ndarray, str, int]] = []
        self._crosshair_locked = False

        self._setup_ui()
        self._setup_crosshair()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(5, 2, 5, 2)

        self.title_label = QLabel("No log loaded")
        self.title_label.setStyleSheet("font-weight: bold;")
        toolbar.addWidget(self.title_label)
        toolbar.addStretch()

        self.lock_btn = QPushButton("Lock Crosshair")
        self.lock_btn.setCheckable(True)
        self.lock_btn.clicked.connect(self._toggle_crosshair_lock)
        toolbar.addWidget(self.lock_btn)

        layout.addLayout(toolbar)

        pg.setConfigOptions(antialias=True, useOpenGL=False)

        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground("#1e1e1e")
        self.plot_widget.showGrid(x=True, y=True, alpha=0.3)
        self.plot_item = self.plot_widget.getPlotItem()
        self.plot_item.setLabel("bottom", "Time", "s")
        self.legend = self.plot_item.addLegend()

        layout.addWidget(self.plot_widget)

        self.readout = CrosshairReadout(self.plot_widget)
        self.readout.move(10, 10)

    def _setup_crosshair(self):
        pen = pg.mkPen(color="#888", width=1, style=Qt.PenStyle.DashLine)

        self.vline = pg.InfiniteLine(angle=90, movable=False, pen=pen)
        self.plot_item.addItem(self.vline, ignoreBounds=True)

        self.plot_widget.scene().sigMouseMoved.connect(self._on_mouse_moved)

    def set_title(self, title: str) -> None:
        self.title_label.setText(title)

    def set_channels(self, channels: list[Channel]) -> None:
        """Replace the plotted channels."""
        self.clear()
        for i, channel in enumerate(channels):
            x_data = channel.timestamps()
            y_data = channel.values()
            label = f"{channel.name} [{channel.units}]" if channel.units else channel.name
            self.plot_item.plot(
                x_data, y_data,
                pen=pg.mkPen(COLORS[i % len(COLORS)], width=1.5),
                name=label
            )
            self._series_data.append((channel.name, x_data, y_data, channel.units, channel.decimals))
        self.plot_item.enableAutoRange()

    def clear(self) -> None:
        """Remove all plotted channels."""
        self._series_data.clear()
        self.legend.clear()
        for item in self.plot_item.listDataItems():
            self.plot_item.removeItem(item)
        self.readout.setVisible(False)

    def _on_mouse_moved(self, pos):
        if self._crosshair_locked:
            return

        if self.plot_item.sceneBoundingRect().contains(pos):
            x = self.plot_item.vb.mapSceneToView(pos).x()
            self.vline.setPos(x)
            self._update_readout(x)
            self.crosshair_moved.emit(x)
            self.readout.setVisible(bool(self._series_data))
        else:
            self.readout.setVisible(False)

    def _toggle_crosshair_lock(self):
        self._crosshair_locked = not self._crosshair_locked
        self.lock_btn.setChecked(self._crosshair_locked)

        if self._crosshair_locked:
            self.vline.setPen(pg.mkPen(color="#ff0", width=2))
        else:
            self.vline.setPen(pg.mkPen(color="#888", width=1, style=Qt.PenStyle.DashLine))

    def _update_readout(self, x_val: float):
        """Show the sample nearest to x_val for each channel."""
        values = []

        for name, x_data, y_data, units, decimals in self._series_data:
            if len(x_data) == 0:
                continue

            idx = np.searchsorted(x_data, x_val)
            if idx >= len(x_data):
                idx = len(x_data) - 1
            elif idx > 0:
                if abs(x_data[idx - 1] - x_val) < abs(x_data[idx] - x_val):
                    idx = idx - 1

            values.append((name, f"{float(y_data[idx]):.{decimals}f} {units}".rstrip()))

        self.readout.set_values(x_val, values)
