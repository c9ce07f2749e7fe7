"""
Main Window for the datalog viewer.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QDockWidget,
    QFileDialog,
    QMainWindow,
    QMessageBox,
)

from ..core import (
    IngestError,
    IngestSettings,
    Log,
    LogReader,
    format_frequency_report,
)
from ..plot import ChannelPlotWidget
from .widgets import ChannelSelector

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, settings: Optional[IngestSettings] = None):
        super().__init__()

        self.setWindowTitle("Datalog Viewer")
        self.setMinimumSize(1000, 700)
        self.resize(1400, 900)

        self.reader = LogReader(settings)
        self.log: Optional[Log] = None

        self.plot_widget = ChannelPlotWidget()
        self.setCentralWidget(self.plot_widget)

        self.channel_selector = ChannelSelector()
        dock = QDockWidget("Channels", self)
        dock.setWidget(self.channel_selector)
        dock.setFeatures(
            QDockWidget.DockWidgetFeature.DockWidgetMovable |
            QDockWidget.DockWidgetFeature.DockWidgetFloatable
        )
        dock.setMinimumWidth(250)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, dock)

        self.channel_selector.channels_selected.connect(self.on_channels_selected)

        self._setup_menus()
        self.statusBar().showMessage("Ready")

    def _setup_menus(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")

        open_action = QAction("&Open Log...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.on_open_log)
        file_menu.addAction(open_action)

        close_action = QAction("&Close Log", self)
        close_action.triggered.connect(self.on_close_log)
        file_menu.addAction(close_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        view_menu = menubar.addMenu("&View")

        freq_action = QAction("Channel &Frequencies", self)
        freq_action.triggered.connect(self.on_show_frequencies)
        view_menu.addAction(freq_action)

    def open_file(self, filepath: Path | str) -> bool:
        """Load a log file, replacing the current one."""
        try:
            log = self.reader.read_file(filepath)
        except IngestError as e:
            logger.error(f"Failed to load {filepath}: {e}")
            QMessageBox.warning(
                self,
                "Import Error",
                f"Failed to import {filepath}:\n{str(e)}"
            )
            return False

        self.on_close_log()
        self.log = log
        self.channel_selector.set_log(log)
        self.plot_widget.set_title(log.name)
        self.statusBar().showMessage(
            f"Loaded {log.channel_count()} channels, {log.duration():.3f} s from {Path(filepath).name}"
        )
        return True

    @Slot()
    def on_open_log(self):
        filepath, _ = QFileDialog.getOpenFileName(
            self,
            "Open Log",
            "",
            "CSV Logs (*.csv *.txt *.dat);;All Files (*)"
        )
        if filepath:
            self.open_file(filepath)

    @Slot()
    def on_close_log(self):
        if self.log is not None:
            self.log.destroy()
            self.log = None
        self.channel_selector.set_log(None)
        self.plot_widget.clear()
        self.plot_widget.set_title("No log loaded")

    @Slot(list)
    def on_channels_selected(self, indices: list[int]):
        if self.log is None:
            return
        count = self.log.channel_count()
        self.plot_widget.set_channels([self.log.channels[i] for i in indices if 0 <= i < count])

    @Slot()
    def on_show_frequencies(self):
        if self.log is None:
            QMessageBox.information(self, "No Log", "Open a log first.")
            return
        QMessageBox.information(self, "Channel Frequencies", format_frequency_report(self.log))
