# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/fines/services/__init__.py
"""

from .fine_assessor import (
    AppliedFine,
    FineAssessmentResult,
    FineAssessor,
    FineNotice,
    FineRule,
    fine_cutoff,
)

__all__ = ["AppliedFine", "FineAssessmentResult", "FineAssessor", "FineNotice", "FineRule", "fine_cutoff"]
