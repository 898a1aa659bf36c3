# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/contributions/services/__init__.py
"""

from .contribution_cycle_service import (
    ContributionCycleResult,
    ContributionCycleService,
    ContributionNotice,
)

__all__ = ["ContributionCycleResult", "ContributionCycleService", "ContributionNotice"]
