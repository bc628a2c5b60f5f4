"""
Modelos de alertas de vencimiento y búsquedas guardadas
"""

from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, Field, field_validator

AlertType = Literal["deadline_warning", "deadline_urgent", "weekly_digest"]
AlertStatus = Literal["pending", "sent", "failed"]


class AlertPreferences(BaseModel):
    """Preferencias de aviso por correo de un usuario"""
    email_notifications: bool = True
    deadline_warnings: bool = True
    deadline_urgent: bool = True
    weekly_digest: bool = False


class ScheduledAlert(BaseModel):
    """
    Alerta programada para un usuario.

    Ciclo de vida: pending → sent | failed. Una alerta enviada o fallida
    no vuelve a pending.
    """
    id: Optional[str] = None
    user_id: str
    alert_type: AlertType
    convocatoria_id: Optional[str] = Field(None, description="None en los resúmenes semanales")
    scheduled_for: str = Field(..., description="Momento desde el que la alerta puede enviarse (ISO 8601)")
    status: AlertStatus = "pending"
    sent_at: Optional[str] = None
    error_message: Optional[str] = None
    email_content: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", "convocatoria_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


class SavedSearch(BaseModel):
    """Búsqueda guardada con nombre por el usuario"""
    search_name: str = ""
    original_query: str = ""
    search_parameters: Dict[str, Any] = Field(default_factory=dict)
    is_favorite: bool = False
