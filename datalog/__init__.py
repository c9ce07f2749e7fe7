"""
datalog - ingestion and inspection of time-series measurement logs.
"""

__version__ = "1.0.0"
