# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
AEROCAL: ensemble Kalman calibration of aerosol activation parameters.

The package is split into:
- ``aerocal.calibration``: priors, synthetic truth, EKI update and the
  calibration driver
- ``aerocal.physics``: thermodynamics and the ARG2000 activation scheme
- ``aerocal.models``: forward models wrapping the physics
- ``aerocal.reporting``: plots, summaries and NetCDF output
"""

from .aerocal_version import __version__

__all__ = ["__version__"]
