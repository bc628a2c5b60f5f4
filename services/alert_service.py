"""
Selección de alertas de vencimiento

Decide qué avisos corresponde programar (una semana antes del cierre,
el día anterior y el resumen semanal) y controla el estado de cada
alerta. El envío del correo queda fuera de este módulo.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional

from dateutil import parser as date_parser

from config import ALERTS_CONFIG
from models import AlertPreferences, ScheduledAlert, StoredConvocatoria
from utils.date_parser import days_until
from utils.errors import InvalidRequestError

logger = logging.getLogger(__name__)

ALERTS_TABLE = "scheduled_alerts"


def _moment(value: Optional[str], now: datetime) -> Optional[datetime]:
    """Interpreta un timestamp ISO comparable con `now`"""
    if not value:
        return None
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        logger.warning(f"⚠️ Timestamp de alerta inválido: {value}")
        return None
    if now.tzinfo is None and parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None)
    elif now.tzinfo is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=now.tzinfo)
    return parsed


def deadline_alert_type(remaining: Optional[int], config: Dict[str, Any] = ALERTS_CONFIG) -> Optional[str]:
    """
    Tipo de aviso que corresponde a los días que faltan para el cierre.

    Returns:
        "deadline_warning", "deadline_urgent" o None si hoy no toca avisar
    """
    if remaining is None:
        return None
    if remaining == config["deadline_warning_days"]:
        return "deadline_warning"
    if remaining == config["deadline_urgent_days"]:
        return "deadline_urgent"
    return None


def select_deadline_alerts(
    user_id: str,
    records: Iterable[StoredConvocatoria],
    preferences: AlertPreferences,
    existing: Iterable[ScheduledAlert],
    now: datetime,
    config: Dict[str, Any] = ALERTS_CONFIG,
) -> List[ScheduledAlert]:
    """
    Alertas nuevas que hay que programar en este momento.

    Una convocatoria abierta recibe un aviso de cada tipo como máximo: si ya
    existe una alerta del mismo tipo para ella (en cualquier estado) no se
    vuelve a generar. El resumen semanal se genera el día configurado si no
    hubo otro en el intervalo.

    Args:
        user_id: Dueño de las convocatorias
        records: Convocatorias del usuario
        preferences: Preferencias de aviso del usuario
        existing: Alertas ya programadas para el usuario
        now: Momento de la evaluación
    """
    if not preferences.email_notifications:
        return []

    existing = list(existing)
    already = {(a.convocatoria_id, a.alert_type) for a in existing}
    enabled = {
        "deadline_warning": preferences.deadline_warnings,
        "deadline_urgent": preferences.deadline_urgent,
    }
    scheduled_for = now.isoformat()
    alerts = []

    for record in records:
        if record.estado not in config["alert_states"]:
            continue
        remaining = days_until(record.fecha_cierre, now)
        alert_type = deadline_alert_type(remaining, config)
        if alert_type is None or not enabled[alert_type]:
            continue
        if (record.id, alert_type) in already:
            continue
        already.add((record.id, alert_type))
        alerts.append(ScheduledAlert(
            user_id=user_id,
            alert_type=alert_type,
            convocatoria_id=record.id,
            scheduled_for=scheduled_for,
            email_content={
                "convocatoria_name": record.nombre_concurso,
                "institucion": record.institucion,
                "fecha_cierre": record.fecha_cierre,
                "days_until": remaining,
            },
        ))

    if preferences.weekly_digest and now.weekday() == config["digest_weekday"]:
        since = now - timedelta(days=config["digest_interval_days"])
        recent_digest = any(
            a.alert_type == "weekly_digest" and (_moment(a.scheduled_for, now) or since) > since
            for a in existing
        )
        if not recent_digest:
            alerts.append(ScheduledAlert(
                user_id=user_id,
                alert_type="weekly_digest",
                scheduled_for=scheduled_for,
                email_content={"week_start": since.isoformat(), "week_end": now.isoformat()},
            ))

    return alerts


def due_alerts(alerts: Iterable[ScheduledAlert], now: datetime) -> List[ScheduledAlert]:
    """Alertas pendientes cuya hora programada ya llegó, en orden de programación"""
    due = []
    for alert in alerts:
        moment = _moment(alert.scheduled_for, now)
        if alert.status == "pending" and moment is not None and moment <= now:
            due.append((moment, alert))
    due.sort(key=lambda pair: pair[0])
    return [alert for _, alert in due]


def mark_sent(alert: ScheduledAlert, now: datetime) -> ScheduledAlert:
    """
    Transición pending → sent.

    Raises:
        InvalidRequestError: la alerta ya no está pendiente
    """
    _require_pending(alert)
    return alert.model_copy(update={"status": "sent", "sent_at": now.isoformat(), "error_message": None})


def mark_failed(alert: ScheduledAlert, error: str) -> ScheduledAlert:
    """
    Transición pending → failed.

    Raises:
        InvalidRequestError: la alerta ya no está pendiente
    """
    _require_pending(alert)
    return alert.model_copy(update={"status": "failed", "error_message": error})


def _require_pending(alert: ScheduledAlert) -> None:
    if alert.status != "pending":
        raise InvalidRequestError(f"La alerta {alert.id} ya está en estado {alert.status}")


def expired_alerts(alerts: Iterable[ScheduledAlert], now: datetime, config: Dict[str, Any] = ALERTS_CONFIG) -> List[ScheduledAlert]:
    """Alertas enviadas hace más del periodo de retención"""
    cutoff = now - timedelta(days=config["sent_retention_days"])
    expired = []
    for alert in alerts:
        sent_at = _moment(alert.sent_at, now)
        if alert.status == "sent" and sent_at is not None and sent_at < cutoff:
            expired.append(alert)
    return expired


class AlertService:
    """Programa y registra alertas de un usuario usando el almacenamiento"""

    def __init__(self, persistence, clock: Optional[Callable[[], datetime]] = None, config: Optional[Dict[str, Any]] = None):
        self.persistence = persistence
        self.clock = clock or datetime.now
        self.config = config or ALERTS_CONFIG

    def existing_alerts(self, user_id: str) -> List[ScheduledAlert]:
        rows = self.persistence.list_rows(ALERTS_TABLE, {"user_id": user_id}) or []
        return [ScheduledAlert.model_validate(row) for row in rows]

    def schedule(self, user_id: str, preferences: AlertPreferences) -> List[ScheduledAlert]:
        """
        Guarda las alertas que corresponden ahora.

        Returns:
            Alertas creadas, con el id asignado por el almacenamiento
        """
        now = self.clock()
        records = self.persistence.list_convocatorias(user_id)
        alerts = select_deadline_alerts(user_id, records, preferences, self.existing_alerts(user_id), now, self.config)

        created = []
        for alert in alerts:
            rows = self.persistence.insert_row(ALERTS_TABLE, alert.model_dump(exclude={"id"}))
            if rows:
                alert = alert.model_copy(update={"id": str(rows[0].get("id"))})
            created.append(alert)

        logger.info(f"🔔 {len(created)} alertas programadas para {user_id}")
        return created

    def pending(self, user_id: str) -> List[ScheduledAlert]:
        return due_alerts(self.existing_alerts(user_id), self.clock())

    def record_delivery(self, alert: ScheduledAlert, error: Optional[str] = None) -> ScheduledAlert:
        """Registra el resultado del envío de una alerta pendiente"""
        if error:
            updated = mark_failed(alert, error)
            logger.error(f"❌ Falló el envío de la alerta {alert.id}: {error}")
        else:
            updated = mark_sent(alert, self.clock())
        self.persistence.update_rows(
            ALERTS_TABLE,
            {"id": alert.id},
            {"status": updated.status, "sent_at": updated.sent_at, "error_message": updated.error_message},
        )
        return updated
