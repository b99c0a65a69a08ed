# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Plot styling defaults.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PlotConfig:
    """Figure sizes, colours and output settings shared by all plotters."""
    FIGURE_SIZE_SMALL: Tuple[float, float] = (8.0, 5.0)
    FIGURE_SIZE_MEDIUM: Tuple[float, float] = (10.0, 6.0)
    DPI: int = 150
    GRID_ALPHA: float = 0.3
    SCATTER_SIZE: float = 12.0
    SCATTER_ALPHA: float = 0.7
    LINE_WIDTH: float = 1.5
    MARKER_SIZE: float = 9.0
    COLOR_MEAN: str = '#1f77b4'
    COLOR_TRUTH: str = '#d62728'
    COLORMAP_ITERATIONS: str = 'viridis'


DEFAULT_PLOT_CONFIG = PlotConfig()
