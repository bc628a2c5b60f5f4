"""
Modelos de estadísticas del dashboard y del calendario
"""

from typing import Dict, List, Optional, Literal
from pydantic import BaseModel, Field

Priority = Literal["high", "medium", "low"]


class Overview(BaseModel):
    total_convocatorias: int = 0
    active_convocatorias: int = 0
    deadline_this_week: int = 0
    deadline_this_month: int = 0


class OrganizationCount(BaseModel):
    name: str
    count: int


class MonthCount(BaseModel):
    month: str = Field(..., description="Mes en formato YYYY-MM")
    count: int


class RecentActivity(BaseModel):
    id: str
    title: str
    action: str
    date: Optional[str] = None


class UpcomingDeadline(BaseModel):
    id: str
    title: str
    organization: str
    deadline: str
    days_until: int
    priority: Priority


class PlanUsage(BaseModel):
    current_plan: str
    convocatorias_used: int
    convocatorias_limit: Optional[int] = Field(None, description="None significa ilimitadas")
    usage_percentage: int = Field(0, ge=0, le=100)


class DashboardStats(BaseModel):
    """Estadísticas agregadas sobre las convocatorias de un usuario"""
    overview: Overview
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_organization: List[OrganizationCount] = Field(default_factory=list)
    by_month: List[MonthCount] = Field(default_factory=list)
    recent_activity: List[RecentActivity] = Field(default_factory=list)
    upcoming_deadlines: List[UpcomingDeadline] = Field(default_factory=list)
    plan_usage: PlanUsage


class CalendarEvent(BaseModel):
    """Evento del calendario de plazos"""
    id: str
    title: str
    date: str
    type: Literal["apertura", "cierre", "resultados"]
    priority: Priority
    organization: str = ""
    days_until: int
    convocatoria_id: str
