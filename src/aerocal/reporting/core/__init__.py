"""
Core reporting utilities.

This module provides shared utilities for the reporting subsystem.
"""

from aerocal.reporting.core.base_plotter import BasePlotter

__all__ = ['BasePlotter']
