# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Reporting and output configuration model.
"""

from typing import Literal

from pydantic import BaseModel, Field

from .base import FROZEN_CONFIG


class ReportingConfig(BaseModel):
    """Where and what to write after a calibration run."""
    model_config = FROZEN_CONFIG

    output_dir: str = Field(default='aerocal_output', alias='OUTPUT_DIR')
    make_plots: bool = Field(default=True, alias='MAKE_PLOTS')
    plot_format: Literal['svg', 'png', 'pdf'] = Field(default='svg', alias='PLOT_FORMAT')
    write_netcdf: bool = Field(default=True, alias='WRITE_NETCDF')
    write_summary_csv: bool = Field(default=True, alias='WRITE_SUMMARY_CSV')
    log_level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = Field(
        default='INFO', alias='LOG_LEVEL'
    )
