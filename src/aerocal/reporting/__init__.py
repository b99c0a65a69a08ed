# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Reporting for AEROCAL: ensemble plots, summaries and NetCDF output.
"""

from .reporting_manager import ReportingManager
from .summary import format_comparison, print_comparison

__all__ = [
    "ReportingManager",
    "format_comparison",
    "print_comparison",
]
