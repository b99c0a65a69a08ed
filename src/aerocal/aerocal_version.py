# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

__version__ = "0.1.0"
