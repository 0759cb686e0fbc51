# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Access control core for the Amanah back-office application."""

__version__ = "0.1.0"
