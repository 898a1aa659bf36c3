# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/models.py

Importa todos los modelos ORM para registrarlos en Base.metadata
(create_all en dev/test y resolución de ForeignKey por nombre de tabla).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from waterbilling.modules.customers.models import Customer  # noqa: F401
from waterbilling.modules.billing.models import Bill  # noqa: F401
from waterbilling.modules.contributions.models import Contribution  # noqa: F401
from waterbilling.modules.fines.models import Fine, FineType  # noqa: F401
from waterbilling.modules.payments.models import (  # noqa: F401
    Payment,
    PaymentAllocation,
    PaymentAttemptLog,
)
from waterbilling.modules.notifications.models import NotificationLog  # noqa: F401
from waterbilling.modules.system_settings.models import SystemSetting  # noqa: F401
from waterbilling.modules.jobs.models import JobRun  # noqa: F401

__all__ = [
    "Customer",
    "Bill",
    "Contribution",
    "Fine",
    "FineType",
    "Payment",
    "PaymentAllocation",
    "PaymentAttemptLog",
    "NotificationLog",
    "SystemSetting",
    "JobRun",
]

# Fin del archivo backend/waterbilling/modules/models.py
