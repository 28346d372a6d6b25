# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Removal of staged build output."""

from __future__ import annotations

from .plan import CleanPlan, CleanPlanItem, CleanPlanner, plan_clean, remove_path
from .runner import CleanResult, clean

__all__ = [
    "CleanPlan",
    "CleanPlanItem",
    "CleanPlanner",
    "CleanResult",
    "clean",
    "plan_clean",
    "remove_path",
]
