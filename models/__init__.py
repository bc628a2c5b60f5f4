"""
Modelos de datos centralizados para ConvocatoriasPro
"""

from .convocatoria import Convocatoria, StoredConvocatoria, ESTADOS_VALIDOS
from .parsing import RawInput, PromptPayload, ExtractionResult, ParseOutcome
from .validacion import Improvement, ValidationOutcome, AIValidation
from .enriquecimiento import TimelineEvent, RiskAssessment, EnrichmentResult
from .dashboard import DashboardStats, CalendarEvent
from .alertas import AlertPreferences, ScheduledAlert, SavedSearch
from .sync import (
    PendingOperation,
    SyncItemResult,
    SyncReport,
    PaymentNotification,
    SubscriptionChange,
)

__all__ = [
    "Convocatoria",
    "StoredConvocatoria",
    "ESTADOS_VALIDOS",
    "RawInput",
    "PromptPayload",
    "ExtractionResult",
    "ParseOutcome",
    "Improvement",
    "ValidationOutcome",
    "AIValidation",
    "TimelineEvent",
    "RiskAssessment",
    "EnrichmentResult",
    "DashboardStats",
    "CalendarEvent",
    "AlertPreferences",
    "ScheduledAlert",
    "SavedSearch",
    "PendingOperation",
    "SyncItemResult",
    "SyncReport",
    "PaymentNotification",
    "SubscriptionChange",
]
