"""
Cuerpos de las peticiones HTTP
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from models import AlertPreferences, PendingOperation
from services.export_service import ExportFilters, ExportOptions


class ParseRequest(BaseModel):
    content: str = ""
    fileType: Optional[str] = Field(None, description="Tipo de archivo (pdf, txt, html...)")
    source: Literal["file", "clipboard", "url"] = "clipboard"


class ConvocatoriaRequest(BaseModel):
    convocatoria: Optional[Dict[str, Any]] = None


class SyncRequest(BaseModel):
    pending_operations: List[PendingOperation] = Field(default_factory=list)
    sync_type: Optional[str] = None


class ExportRequest(BaseModel):
    format: Literal["csv"] = "csv"
    filters: ExportFilters = Field(default_factory=ExportFilters)
    options: ExportOptions = Field(default_factory=ExportOptions)


class CurrentUser(BaseModel):
    """Usuario autenticado con su plan vigente"""
    id: str
    email: Optional[str] = None
    plan: str


class AlertsRequest(BaseModel):
    preferences: AlertPreferences = Field(default_factory=AlertPreferences)
