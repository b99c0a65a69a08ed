# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Configuration package: Pydantic models and the YAML loader.
"""

from .loader import build_config, load_config, template_path
from .models import AerocalConfig

__all__ = ['AerocalConfig', 'build_config', 'load_config', 'template_path']
