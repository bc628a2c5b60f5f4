"""
Servicios de negocio de ConvocatoriasPro
"""

from .parsing_service import ParsingService
from .validation_service import ValidationService
from .enrichment_service import EnrichmentService
from .dashboard_service import DashboardService, aggregate
from .calendar_service import CalendarService, build_calendar_events, resolve_window
from .sync_service import SyncService, PendingOperationQueue
from .subscription_service import SubscriptionService, compute_subscription_change
from .export_service import ExportService, ExportFilters, ExportOptions
from .alert_service import AlertService, select_deadline_alerts, due_alerts, mark_sent, mark_failed
from .search_service import SavedSearchService

__all__ = [
    "ParsingService",
    "ValidationService",
    "EnrichmentService",
    "DashboardService",
    "aggregate",
    "CalendarService",
    "build_calendar_events",
    "resolve_window",
    "SyncService",
    "PendingOperationQueue",
    "SubscriptionService",
    "compute_subscription_change",
    "ExportService",
    "ExportFilters",
    "ExportOptions",
    "AlertService",
    "select_deadline_alerts",
    "due_alerts",
    "mark_sent",
    "mark_failed",
    "SavedSearchService",
]
