# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Plotting modules for AEROCAL reporting.
"""

from aerocal.reporting.plotters.ensemble_plotter import EnsemblePlotter

__all__ = ['EnsemblePlotter']
