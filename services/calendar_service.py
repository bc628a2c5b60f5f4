"""
Eventos de calendario a partir de las fechas de cada convocatoria
"""

import calendar
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from config import CALENDAR_CONFIG
from models import StoredConvocatoria, CalendarEvent
from services.dashboard_service import deadline_priority
from utils.date_parser import to_date, days_until, add_months
from utils.errors import InvalidRequestError

logger = logging.getLogger(__name__)

EVENT_TITLES = {
    "apertura": "📅 Apertura",
    "cierre": "⏰ Cierre",
    "resultados": "🏆 Resultados",
}


def resolve_window(view: Optional[str], month: Optional[str], today: date) -> Tuple[date, date]:
    """
    Rango de fechas (inclusive) de la vista del calendario.

    - upcoming: desde hoy hasta 3 meses después
    - month con `month=YYYY-MM`: ese mes completo
    - month sin parámetro: el mes actual

    Raises:
        InvalidRequestError: vista desconocida o mes mal formado
    """
    view = view or "month"
    if view == "upcoming":
        end = add_months(datetime(today.year, today.month, today.day), CALENDAR_CONFIG["upcoming_months"])
        return today, end.date()
    if view != "month":
        raise InvalidRequestError(f"Vista de calendario desconocida: {view}")

    year, month_num = today.year, today.month
    if month:
        try:
            year_str, month_str = month.split("-")
            year, month_num = int(year_str), int(month_str)
            if not 1 <= month_num <= 12:
                raise ValueError(month)
        except ValueError:
            raise InvalidRequestError(f"Mes inválido (se espera YYYY-MM): {month}")

    last_day = calendar.monthrange(year, month_num)[1]
    return date(year, month_num, 1), date(year, month_num, last_day)


def build_calendar_events(
    records: Iterable[StoredConvocatoria],
    start: date,
    end: date,
    now: datetime,
) -> List[CalendarEvent]:
    """
    Un evento por cada fecha conocida (apertura, cierre, resultados) dentro
    del rango, ordenados por fecha.
    """
    events = []
    for record in records:
        for event_type, value in (
            ("apertura", record.fecha_apertura),
            ("cierre", record.fecha_cierre),
            ("resultados", record.fecha_resultados),
        ):
            event_date = to_date(value)
            if event_date is None or not start <= event_date <= end:
                continue
            remaining = days_until(event_date, now)
            priority = deadline_priority(remaining) if event_type == "cierre" else "medium"
            events.append(CalendarEvent(
                id=f"{record.id}_{event_type}",
                title=f"{EVENT_TITLES[event_type]}: {record.nombre_concurso or 'Sin nombre'}",
                date=event_date.isoformat(),
                type=event_type,
                priority=priority,
                organization=record.institucion or "",
                days_until=remaining,
                convocatoria_id=record.id,
            ))

    events.sort(key=lambda e: (e.date, e.id))
    return events


class CalendarService:
    """Arma el calendario de un usuario leyendo sus convocatorias"""

    def __init__(self, persistence, clock=None):
        self.persistence = persistence
        self.clock = clock or datetime.now

    def get_events(self, user_id: str, view: Optional[str] = None, month: Optional[str] = None) -> dict:
        now = self.clock()
        start, end = resolve_window(view, month, now.date())
        records = self.persistence.list_convocatorias(user_id)
        events = build_calendar_events(records, start, end, now)
        logger.info(f"{len(events)} eventos entre {start} y {end}")
        return {
            "events": [e.model_dump() for e in events],
            "range": {"start": start.isoformat(), "end": end.isoformat(), "view": view or "month"},
        }
