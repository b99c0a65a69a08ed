# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

import sys

from aerocal.cli import main

sys.exit(main())
