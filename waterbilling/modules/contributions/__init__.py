# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/contributions/__init__.py

Aportes mensuales obligatorios por cliente.
"""

from .enums import ContributionStatus, OPEN_CONTRIBUTION_STATUSES
from .models import Contribution
from .repository import ContributionRepository

__all__ = ["ContributionStatus", "OPEN_CONTRIBUTION_STATUSES", "Contribution", "ContributionRepository"]
