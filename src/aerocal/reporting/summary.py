# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Text and table summaries of a calibration.
"""

from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd


def format_comparison(
    summary: pd.DataFrame,
    digits: int = 6,
) -> List[str]:
    """Lines of the form ``"Molar mass [kg/mol]: 0.058443 vs 0.058443"``.

    Args:
        summary: Parameter summary with ``label``, ``final_mean`` and,
            optionally, ``true_value`` columns.
        digits: Rounding of the estimate.
    """
    lines = []
    for _, row in summary.iterrows():
        estimate = round(float(row['final_mean']), digits)
        if 'true_value' in summary.columns:
            lines.append(f"{row['label']}: {estimate} vs {row['true_value']}")
        else:
            lines.append(f"{row['label']}: {estimate}")
    return lines


def print_comparison(summary: pd.DataFrame, digits: int = 6) -> None:
    for line in format_comparison(summary, digits):
        print(line)


def estimates_dict(summary: pd.DataFrame) -> Dict[str, Dict[str, Optional[float]]]:
    """JSON friendly view of the parameter summary."""
    result = {}
    for name, row in summary.iterrows():
        result[str(name)] = {
            'final_mean': float(row['final_mean']),
            'final_std': float(row['final_std']),
            'true_value': float(row['true_value']) if 'true_value' in summary.columns else None,
            'relative_error': (
                float(row['relative_error']) if 'relative_error' in summary.columns else None
            ),
        }
    return result


def write_summary_csv(summary: pd.DataFrame, output_file: Path) -> Path:
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    summary.to_csv(output_file)
    return output_file
