# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Base class for plotters.

Handles the matplotlib backend, common axis styling and saving, so
concrete plotters only draw.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Tuple

from aerocal.core.mixins import LoggingMixin
from aerocal.reporting.config.plot_config import DEFAULT_PLOT_CONFIG, PlotConfig


class BasePlotter(LoggingMixin):
    """
    Shared plotting infrastructure.

    Args:
        config: AerocalConfig instance (may be None for standalone use).
        logger: Logger instance.
        plot_config: Styling defaults.
    """

    def __init__(
        self,
        config: Any = None,
        logger: Optional[logging.Logger] = None,
        plot_config: Optional[PlotConfig] = None,
    ):
        self.config = config
        if logger is not None:
            self.logger = logger
        self.plot_config = plot_config or DEFAULT_PLOT_CONFIG

    def _setup_matplotlib(self) -> Tuple[Any, Any]:
        """Select the non-interactive backend and return ``(pyplot, matplotlib)``."""
        import matplotlib
        matplotlib.use('Agg')
        import matplotlib.pyplot as plt
        return plt, matplotlib

    def _apply_standard_styling(
        self,
        ax: Any,
        xlabel: str = '',
        ylabel: str = '',
        title: Optional[str] = None,
        legend: bool = True,
        legend_loc: str = 'best',
    ) -> None:
        ax.set_xlabel(xlabel)
        ax.set_ylabel(ylabel)
        if title:
            ax.set_title(title)
        ax.grid(True, alpha=self.plot_config.GRID_ALPHA)
        if legend:
            ax.legend(loc=legend_loc)

    def _save_and_close(self, fig: Any, output_file: Path) -> str:
        """Save ``fig`` to ``output_file``, close it and return the path."""
        import matplotlib.pyplot as plt

        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            fig.savefig(output_file, dpi=self.plot_config.DPI, bbox_inches='tight')
        finally:
            plt.close(fig)
        self.logger.debug(f"Saved plot: {output_file}")
        return str(output_file)
