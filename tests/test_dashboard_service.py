"""Tests for dashboard aggregation."""

from models import StoredConvocatoria
from services.dashboard_service import DashboardService, aggregate, deadline_priority, plan_usage


def stored(sample_records):
    return [StoredConvocatoria.model_validate(r) for r in sample_records]


class TestDeadlinePriority:
    def test_thresholds(self):
        assert deadline_priority(0) == "high"
        assert deadline_priority(7) == "high"
        assert deadline_priority(8) == "medium"
        assert deadline_priority(30) == "medium"
        assert deadline_priority(31) == "low"


class TestAggregate:
    def test_overview_counts(self, sample_records, now):
        stats = aggregate(stored(sample_records), "free", now)

        assert stats.overview.total_convocatorias == 4
        assert stats.overview.active_convocatorias == 2
        assert stats.overview.deadline_this_week == 1
        assert stats.overview.deadline_this_month == 2

    def test_by_status_includes_missing(self, sample_records, now):
        stats = aggregate(stored(sample_records), "free", now)
        assert stats.by_status == {"abierto": 2, "cerrado": 1, "sin_estado": 1}

    def test_organizations_ordered_by_count_then_name(self, sample_records, now):
        stats = aggregate(stored(sample_records), "free", now)
        assert [(o.name, o.count) for o in stats.by_organization] == [
            ("CORFO", 2), ("ANID", 1), ("SERCOTEC", 1),
        ]

    def test_by_month_zero_filled(self, sample_records, now):
        stats = aggregate(stored(sample_records), "free", now)
        assert [m.month for m in stats.by_month] == [
            "2025-01", "2025-02", "2025-03", "2025-04", "2025-05", "2025-06",
        ]
        assert [m.count for m in stats.by_month] == [0, 0, 1, 0, 1, 1]

    def test_recent_activity_newest_first(self, sample_records, now):
        stats = aggregate(stored(sample_records), "free", now)
        assert [a.id for a in stats.recent_activity] == ["1", "2", "3", "4"]
        assert stats.recent_activity[0].action == "Convocatoria añadida"
        assert stats.recent_activity[0].title == "Fondo A"

    def test_upcoming_deadlines_exclude_past(self, sample_records, now):
        stats = aggregate(stored(sample_records), "free", now)
        upcoming = [(d.id, d.days_until, d.priority) for d in stats.upcoming_deadlines]
        assert upcoming == [("1", 3, "high"), ("2", 20, "medium"), ("3", 107, "low")]

    def test_recent_activity_capped_at_five(self, now):
        records = [
            StoredConvocatoria(id=str(i), nombre_concurso=f"F{i}", created_at=f"2025-06-0{i}T00:00:00")
            for i in range(1, 8)
        ]
        stats = aggregate(records, "free", now)
        assert [a.id for a in stats.recent_activity] == ["7", "6", "5", "4", "3"]

    def test_empty_records(self, now):
        stats = aggregate([], "pro_monthly", now)
        assert stats.overview.total_convocatorias == 0
        assert stats.by_status == {}
        assert len(stats.by_month) == 6
        assert all(m.count == 0 for m in stats.by_month)
        assert stats.upcoming_deadlines == []

    def test_deadline_today_counts_this_week(self, now):
        records = [StoredConvocatoria(id="x", nombre_concurso="Hoy", fecha_cierre="2025-06-15")]
        stats = aggregate(records, "free", now)
        assert stats.overview.deadline_this_week == 1
        assert stats.upcoming_deadlines[0].days_until == 0

    def test_same_input_same_output(self, sample_records, now):
        first = aggregate(stored(sample_records), "free", now)
        second = aggregate(stored(sample_records), "free", now)
        assert first.model_dump() == second.model_dump()


class TestPlanUsage:
    def test_free_plan_percentage(self):
        usage = plan_usage(4, "free")
        assert usage.convocatorias_limit == 5
        assert usage.usage_percentage == 80

    def test_free_plan_capped(self):
        assert plan_usage(9, "free").usage_percentage == 100

    def test_pro_plan_unlimited(self):
        usage = plan_usage(40, "pro_annual")
        assert usage.convocatorias_limit is None
        assert usage.usage_percentage == 0

    def test_unknown_plan_treated_as_free(self):
        usage = plan_usage(1, None)
        assert usage.current_plan == "free"
        assert usage.usage_percentage == 20


class TestDashboardService:
    def test_get_stats_reads_persistence(self, persistence, now):
        stats = DashboardService(persistence, clock=lambda: now).get_stats("user-free", "free")
        assert stats.overview.total_convocatorias == 4
        assert stats.plan_usage.usage_percentage == 80
