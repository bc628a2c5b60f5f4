"""
Transición de plan a partir de una notificación de pago aprobada
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from config import get_plan_config, is_pro_plan
from models import PaymentNotification, SubscriptionChange
from utils.date_parser import add_months

logger = logging.getLogger(__name__)


def compute_subscription_change(notification: PaymentNotification, now: datetime) -> Optional[SubscriptionChange]:
    """
    Determina el cambio de plan que corresponde a la notificación.

    Solo un pago aprobado con usuario y plan Pro conocido produce cambio;
    cualquier otra notificación retorna None.
    """
    if notification.type != "payment":
        return None
    if notification.status != "approved":
        return None

    user_id = notification.metadata.user_id
    plan_id = notification.metadata.plan_id
    if not user_id or not plan_id or not is_pro_plan(plan_id):
        return None

    months = get_plan_config(plan_id)["duration_months"]
    expires_at = add_months(now, months)
    return SubscriptionChange(user_id=user_id, plan_id=plan_id, expires_at=expires_at.isoformat())


class SubscriptionService:
    """Aplica en el perfil del usuario el plan pagado"""

    def __init__(self, persistence, clock=None):
        self.persistence = persistence
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def handle_notification(self, notification: PaymentNotification) -> Dict[str, Any]:
        """
        Returns:
            Acuse de recibo con el cambio aplicado (o None si no hubo cambio)
        """
        change = compute_subscription_change(notification, self.clock())
        if change is None:
            logger.info(
                f"Notificación {notification.id or '-'} ({notification.type}/{notification.status}) sin cambio de plan"
            )
            return {"received": True, "updated": False, "status": notification.status}

        self.persistence.update_profile_plan(change.user_id, change.plan_id, change.expires_at)
        logger.info(f"Plan actualizado para usuario {change.user_id}: {change.plan_id} hasta {change.expires_at}")
        return {"received": True, "updated": True, "status": notification.status, "change": change.model_dump()}
