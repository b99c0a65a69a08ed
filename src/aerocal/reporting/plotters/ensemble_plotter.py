# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Ensemble visualization plotter.

Handles plotting of calibrated parameter ensembles across EKI iterations.
"""

from pathlib import Path
from typing import Dict, Optional

import numpy as np  # type: ignore

from aerocal.reporting.core.base_plotter import BasePlotter


class EnsemblePlotter(BasePlotter):
    """
    Plotter for EKI ensemble evolution.

    Handles:
    - Member scatter per iteration, laid out side by side
    - Ensemble mean per iteration against the true value
    """

    def plot_ensemble_scatter(
        self,
        values: np.ndarray,
        output_file: Path,
        ylabel: str,
    ) -> Optional[str]:
        """
        Scatter every member of every iteration.

        Iteration ``k`` occupies member positions ``k * n_members`` onwards,
        so the collapse of the ensemble reads left to right.

        Args:
            values: Constrained values of one parameter, shape (n_members, n_iterations)
            output_file: Path to save the plot
            ylabel: Axis label, e.g. "Molar mass [kg/mol]"

        Returns:
            Path to saved plot, or None if failed
        """
        plt, _ = self._setup_matplotlib()

        try:
            n_members, n_iterations = values.shape
            members = np.arange(1, n_members + 1)
            colors = plt.get_cmap(self.plot_config.COLORMAP_ITERATIONS)(
                np.linspace(0.0, 1.0, max(n_iterations, 2))
            )

            fig, ax = plt.subplots(figsize=self.plot_config.FIGURE_SIZE_MEDIUM)
            for it in range(n_iterations):
                ax.scatter(
                    members + it * n_members,
                    values[:, it],
                    s=self.plot_config.SCATTER_SIZE,
                    alpha=self.plot_config.SCATTER_ALPHA,
                    color=colors[it],
                )

            self._apply_standard_styling(
                ax,
                xlabel="Ensemble Number",
                ylabel=ylabel,
                legend=False,
            )
            plt.tight_layout()

            return self._save_and_close(fig, output_file)

        except Exception as e:
            self.logger.error(f"Error creating ensemble scatter plot: {str(e)}")
            return None

    def plot_ensemble_means(
        self,
        values: np.ndarray,
        output_file: Path,
        ylabel: str,
        true_value: Optional[float] = None,
    ) -> Optional[str]:
        """
        Plot the ensemble mean per iteration with the true value.

        Args:
            values: Constrained values of one parameter, shape (n_members, n_iterations)
            output_file: Path to save the plot
            ylabel: Axis label
            true_value: Horizontal reference line, if known

        Returns:
            Path to saved plot, or None if failed
        """
        plt, _ = self._setup_matplotlib()

        try:
            means = values.mean(axis=0)
            iterations = np.arange(1, means.shape[0] + 1)

            fig, ax = plt.subplots(figsize=self.plot_config.FIGURE_SIZE_SMALL)
            ax.plot(
                iterations, means,
                marker='*',
                markersize=self.plot_config.MARKER_SIZE,
                linewidth=self.plot_config.LINE_WIDTH,
                color=self.plot_config.COLOR_MEAN,
                label="Ensemble Mean",
            )
            if true_value is not None:
                ax.axhline(
                    true_value,
                    color=self.plot_config.COLOR_TRUTH,
                    linewidth=self.plot_config.LINE_WIDTH,
                    label="true value",
                )
            ax.set_xticks(iterations)

            self._apply_standard_styling(
                ax,
                xlabel="Iteration Number",
                ylabel=ylabel,
            )
            plt.tight_layout()

            return self._save_and_close(fig, output_file)

        except Exception as e:
            self.logger.error(f"Error creating ensemble mean plot: {str(e)}")
            return None

    def plot_parameters(
        self,
        parameter_array: np.ndarray,
        prior_set,
        output_dir: Path,
        true_parameters: Optional[Dict[str, float]] = None,
        plot_format: str = 'svg',
    ) -> Dict[str, str]:
        """
        Scatter and mean plots for every parameter.

        Args:
            parameter_array: Shape (n_params, n_members, n_iterations)
            prior_set: PriorSet giving names and axis labels
            output_dir: Folder to save plots
            true_parameters: Optional true values by name
            plot_format: File extension

        Returns:
            Mapping ``'<name>_scatter'`` / ``'<name>_average'`` to saved paths
        """
        output_dir = Path(output_dir)
        true_parameters = true_parameters or {}
        plots: Dict[str, str] = {}

        for i, prior in enumerate(prior_set):
            values = parameter_array[i]
            scatter = self.plot_ensemble_scatter(
                values, output_dir / f"{prior.name}_scatter.{plot_format}", prior.display_name
            )
            if scatter:
                plots[f"{prior.name}_scatter"] = scatter

            average = self.plot_ensemble_means(
                values,
                output_dir / f"{prior.name}_average.{plot_format}",
                prior.display_name,
                true_parameters.get(prior.name),
            )
            if average:
                plots[f"{prior.name}_average"] = average

        self.logger.info(f"Created {len(plots)} ensemble plots in {output_dir}")
        return plots
