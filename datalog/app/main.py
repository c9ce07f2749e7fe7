"""
Main entry point for the datalog viewer.
"""
import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication

from ..core import IngestSettings, load_settings
from .main_window import MainWindow


def _dark_palette() -> QPalette:
    palette = QPalette()
    for role, color in [
        (QPalette.ColorRole.Window, QColor(53, 53, 53)),
        (QPalette.ColorRole.Base, QColor(25, 25, 25)),
        (QPalette.ColorRole.AlternateBase, QColor(53, 53, 53)),
        (QPalette.ColorRole.Button, QColor(53, 53, 53)),
        (QPalette.ColorRole.Highlight, QColor(42, 130, 218)),
    ]:
        palette.setColor(role, color)
    for role in [
        QPalette.ColorRole.WindowText,
        QPalette.ColorRole.Text,
        QPalette.ColorRole.ButtonText,
        QPalette.ColorRole.ToolTipText,
    ]:
        palette.setColor(role, Qt.GlobalColor.white)
    palette.setColor(QPalette.ColorRole.HighlightedText, Qt.GlobalColor.black)
    return palette


def main():
    """Run the datalog viewer."""
    parser = argparse.ArgumentParser(description="View time-series measurement logs")
    parser.add_argument("file", nargs="?", type=Path, help="Log file to open")
    parser.add_argument("--config", type=Path, default=None, help="JSON file with ingestion settings")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args, qt_args = parser.parse_known_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    settings = load_settings(args.config) if args.config else IngestSettings()

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication([sys.argv[0]] + qt_args)
    app.setApplicationName("Datalog Viewer")
    app.setStyle("Fusion")
    app.setPalette(_dark_palette())

    window = MainWindow(settings)
    window.show()
    if args.file:
        window.open_file(args.file)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
