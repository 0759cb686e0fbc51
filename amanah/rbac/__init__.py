# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role based access control: catalog, evaluator, decision cache and guards."""

from amanah.rbac.cache import DecisionCache
from amanah.rbac.catalog import PermissionCatalog, catalog
from amanah.rbac.evaluator import PermissionEvaluator

__all__ = [
    "DecisionCache",
    "PermissionCatalog",
    "PermissionEvaluator",
    "catalog",
]
