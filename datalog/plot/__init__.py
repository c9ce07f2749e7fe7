"""
Plot module for the datalog viewer.
Contains the channel plot widget with crosshair readout.
"""

from .plot_widget import ChannelPlotWidget

__all__ = ["ChannelPlotWidget"]
