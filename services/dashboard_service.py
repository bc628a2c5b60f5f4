"""
Estadísticas del dashboard

`aggregate` es una función pura sobre las convocatorias ya leídas del
almacenamiento: el mismo input (incluido `now`) produce exactamente el
mismo resultado.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional, Dict, Any

from config import DASHBOARD_CONFIG, FREE_PLAN, get_plan_config
from models import StoredConvocatoria, DashboardStats
from models.dashboard import (
    Overview,
    OrganizationCount,
    MonthCount,
    RecentActivity,
    UpcomingDeadline,
    PlanUsage,
)
from utils.date_parser import days_until, add_months, month_key

logger = logging.getLogger(__name__)

NO_STATUS = "sin_estado"
NO_NAME = "Sin nombre"
NO_ORGANIZATION = "Sin institución"


def deadline_priority(days: int, config: Optional[Dict[str, Any]] = None) -> str:
    """high si faltan 7 días o menos, medium si faltan 30 o menos, low en otro caso"""
    config = config or DASHBOARD_CONFIG
    if days <= config["high_priority_days"]:
        return "high"
    if days <= config["medium_priority_days"]:
        return "medium"
    return "low"


def aggregate(
    records: Iterable[StoredConvocatoria],
    plan_id: Optional[str],
    now: datetime,
    config: Optional[Dict[str, Any]] = None,
) -> DashboardStats:
    """
    Calcula las estadísticas del dashboard.

    Args:
        records: Convocatorias del usuario
        plan_id: Plan actual del usuario
        now: Instante de referencia
        config: Umbrales y tamaños (default: DASHBOARD_CONFIG)

    Returns:
        DashboardStats
    """
    config = config or DASHBOARD_CONFIG
    records = list(records)

    remaining = {}
    for record in records:
        days = days_until(record.fecha_cierre, now)
        if days is not None:
            remaining[record.id] = days

    overview = Overview(
        total_convocatorias=len(records),
        active_convocatorias=sum(1 for r in records if r.estado == "abierto"),
        deadline_this_week=sum(1 for d in remaining.values() if 0 <= d <= config["high_priority_days"]),
        deadline_this_month=sum(1 for d in remaining.values() if 0 <= d <= config["medium_priority_days"]),
    )

    by_status = dict(sorted(Counter(r.estado or NO_STATUS for r in records).items()))

    org_counts = Counter(r.institucion.strip() for r in records if r.institucion and r.institucion.strip())
    by_organization = [
        OrganizationCount(name=name, count=count)
        for name, count in sorted(org_counts.items(), key=lambda item: (-item[1], item[0]))[: config["top_organizations"]]
    ]

    by_month = _by_month(records, now, config["trailing_months"])

    newest_first = sorted(records, key=lambda r: (r.created_at or "", r.id), reverse=True)
    recent_activity = [
        RecentActivity(
            id=r.id,
            title=r.nombre_concurso or NO_NAME,
            action="Convocatoria añadida",
            date=r.created_at,
        )
        for r in newest_first[: config["recent_activity_size"]]
    ]

    upcoming = sorted(
        (r for r in records if remaining.get(r.id) is not None and remaining[r.id] >= 0),
        key=lambda r: (remaining[r.id], r.fecha_cierre, r.id),
    )
    upcoming_deadlines = [
        UpcomingDeadline(
            id=r.id,
            title=r.nombre_concurso or NO_NAME,
            organization=r.institucion or NO_ORGANIZATION,
            deadline=r.fecha_cierre,
            days_until=remaining[r.id],
            priority=deadline_priority(remaining[r.id], config),
        )
        for r in upcoming[: config["upcoming_deadlines_size"]]
    ]

    return DashboardStats(
        overview=overview,
        by_status=by_status,
        by_organization=by_organization,
        by_month=by_month,
        recent_activity=recent_activity,
        upcoming_deadlines=upcoming_deadlines,
        plan_usage=plan_usage(len(records), plan_id),
    )


def _by_month(records: List[StoredConvocatoria], now: datetime, months: int) -> List[MonthCount]:
    """Meses calendario hacia atrás incluyendo el actual, con ceros donde no hay registros"""
    created = Counter((r.created_at or "")[:7] for r in records if r.created_at)
    keys = [month_key(add_months(now, -offset)) for offset in range(months - 1, -1, -1)]
    return [MonthCount(month=key, count=created.get(key, 0)) for key in keys]


def plan_usage(used: int, plan_id: Optional[str]) -> PlanUsage:
    """Uso del plan frente al límite de convocatorias (planes Pro no tienen límite)"""
    plan_id = plan_id or FREE_PLAN
    limit = get_plan_config(plan_id)["max_convocatorias"]
    if limit is None:
        return PlanUsage(current_plan=plan_id, convocatorias_used=used, convocatorias_limit=None, usage_percentage=0)
    percentage = min(round(used / limit * 100), 100) if limit else 100
    return PlanUsage(current_plan=plan_id, convocatorias_used=used, convocatorias_limit=limit, usage_percentage=percentage)


class DashboardService:
    """Lee las convocatorias del usuario y calcula sus estadísticas"""

    def __init__(self, persistence, clock=None):
        """
        Args:
            persistence: Adaptador de almacenamiento (SupabaseClient o equivalente)
            clock: Callable que retorna el instante actual (default: datetime.now)
        """
        self.persistence = persistence
        self.clock = clock or datetime.now

    def get_stats(self, user_id: str, plan_id: Optional[str]) -> DashboardStats:
        records = self.persistence.list_convocatorias(user_id)
        logger.info(f"Calculando estadísticas sobre {len(records)} convocatorias")
        return aggregate(records, plan_id, self.clock())
