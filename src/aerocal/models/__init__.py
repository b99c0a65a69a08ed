# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Forward models available for calibration.
"""

from .aerosol_activation_model import CALIBRATABLE_PARAMETERS, AerosolActivationModel

__all__ = [
    "AerosolActivationModel",
    "CALIBRATABLE_PARAMETERS",
]
