"""SQLAlchemy models."""

from app.models.activity_alert import ActivityAlert
from app.models.consultation import Consultation
from app.models.lawyer import Lawyer
from app.models.legal_assistance_request import LegalAssistanceRequest

__all__ = [
    "ActivityAlert",
    "Consultation",
    "Lawyer",
    "LegalAssistanceRequest",
]
