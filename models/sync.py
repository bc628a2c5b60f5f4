"""
Modelos para la sincronización de operaciones pendientes y suscripciones
"""

from typing import Any, Dict, List, Optional, Literal
from pydantic import BaseModel, Field


class PendingOperation(BaseModel):
    """
    Operación creada sin conexión que el cliente envía para aplicar.

    `id` lo genera el cliente y sirve como clave de idempotencia.
    """
    id: str = Field(..., min_length=1)
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[str] = None


class SyncItemResult(BaseModel):
    id: str
    type: str
    status: Literal["success", "error", "skipped", "duplicate"]
    result: Optional[Any] = None
    error: Optional[str] = None
    processed_at: str


class SyncReport(BaseModel):
    total_operations: int = 0
    processed_successfully: int = 0
    failed: int = 0
    items: List[SyncItemResult] = Field(default_factory=list)
    clear_from_client: List[str] = Field(
        default_factory=list,
        description="Ids que el cliente puede borrar de su cola local"
    )


class PaymentMetadata(BaseModel):
    user_id: Optional[str] = None
    plan_id: Optional[str] = None


class PaymentNotification(BaseModel):
    """Notificación del proveedor de pagos ya resuelta con el estado del pago"""
    id: Optional[str] = None
    type: str
    status: Optional[str] = None
    metadata: PaymentMetadata = Field(default_factory=PaymentMetadata)


class SubscriptionChange(BaseModel):
    user_id: str
    plan_id: str
    expires_at: str
