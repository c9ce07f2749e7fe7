"""
App module for the datalog viewer.
Contains Qt UI components and main window.
"""

from .main_window import MainWindow
from .widgets import ChannelSelector

__all__ = [
    "MainWindow",
    "ChannelSelector",
]
