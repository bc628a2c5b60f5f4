"""Tests for deadline alert selection and alert status transitions."""

from datetime import datetime

import pytest

from conftest import FakePersistence
from models import AlertPreferences, ScheduledAlert, StoredConvocatoria
from services.alert_service import (
    AlertService,
    deadline_alert_type,
    due_alerts,
    expired_alerts,
    mark_failed,
    mark_sent,
    select_deadline_alerts,
)
from utils.errors import InvalidRequestError

NOW = datetime(2025, 6, 15, 10, 0)
MONDAY = datetime(2025, 6, 16, 9, 0)

RECORDS = [
    {"id": 1, "nombre_concurso": "Fondo Semana", "institucion": "CORFO", "fecha_cierre": "2025-06-22", "estado": "abierto"},
    {"id": 2, "nombre_concurso": "Fondo Mañana", "institucion": "ANID", "fecha_cierre": "2025-06-16", "estado": "abierto"},
    {"id": 3, "nombre_concurso": "Fondo Lejano", "institucion": "CORFO", "fecha_cierre": "2025-06-30", "estado": "abierto"},
    {"id": 4, "nombre_concurso": "Fondo Cerrado", "institucion": "SERCOTEC", "fecha_cierre": "2025-06-22", "estado": "cerrado"},
    {"id": 5, "nombre_concurso": "Sin fecha", "institucion": "CORFO", "estado": "abierto"},
]


def records():
    return [StoredConvocatoria.model_validate(r) for r in RECORDS]


def alert(**overrides):
    data = {"id": "a1", "user_id": "u1", "alert_type": "deadline_warning", "convocatoria_id": "1",
            "scheduled_for": "2025-06-15T08:00:00"}
    data.update(overrides)
    return ScheduledAlert.model_validate(data)


class TestAlertWindow:
    @pytest.mark.parametrize("remaining,expected", [
        (7, "deadline_warning"),
        (1, "deadline_urgent"),
        (3, None),
        (0, None),
        (-1, None),
        (None, None),
    ])
    def test_days_to_alert_type(self, remaining, expected):
        assert deadline_alert_type(remaining) == expected

    def test_custom_window(self):
        config = {"deadline_warning_days": 14, "deadline_urgent_days": 2}
        assert deadline_alert_type(14, config) == "deadline_warning"
        assert deadline_alert_type(7, config) is None


class TestSelectDeadlineAlerts:
    def test_selects_warning_and_urgent_for_open_records(self):
        alerts = select_deadline_alerts("u1", records(), AlertPreferences(), [], NOW)

        by_id = {a.convocatoria_id: a for a in alerts}
        assert set(by_id) == {"1", "2"}
        assert by_id["1"].alert_type == "deadline_warning"
        assert by_id["1"].email_content["days_until"] == 7
        assert by_id["2"].alert_type == "deadline_urgent"
        assert all(a.status == "pending" and a.user_id == "u1" for a in alerts)
        assert by_id["2"].scheduled_for == NOW.isoformat()

    def test_existing_alert_not_repeated(self):
        existing = [alert(convocatoria_id="1", alert_type="deadline_warning", status="sent")]
        alerts = select_deadline_alerts("u1", records(), AlertPreferences(), existing, NOW)
        assert [a.convocatoria_id for a in alerts] == ["2"]

    def test_existing_alert_of_other_type_does_not_block(self):
        existing = [alert(convocatoria_id="2", alert_type="deadline_warning", status="sent")]
        alerts = select_deadline_alerts("u1", records(), AlertPreferences(), existing, NOW)
        assert ("2", "deadline_urgent") in {(a.convocatoria_id, a.alert_type) for a in alerts}

    def test_notifications_disabled(self):
        prefs = AlertPreferences(email_notifications=False, weekly_digest=True)
        assert select_deadline_alerts("u1", records(), prefs, [], MONDAY) == []

    def test_per_type_preference(self):
        prefs = AlertPreferences(deadline_urgent=False)
        alerts = select_deadline_alerts("u1", records(), prefs, [], NOW)
        assert [a.alert_type for a in alerts] == ["deadline_warning"]

    def test_weekly_digest_on_monday(self):
        prefs = AlertPreferences(deadline_warnings=False, deadline_urgent=False, weekly_digest=True)

        alerts = select_deadline_alerts("u1", records(), prefs, [], MONDAY)

        assert [a.alert_type for a in alerts] == ["weekly_digest"]
        assert alerts[0].convocatoria_id is None
        assert select_deadline_alerts("u1", records(), prefs, [], NOW) == []

    def test_weekly_digest_once_per_week(self):
        prefs = AlertPreferences(deadline_warnings=False, deadline_urgent=False, weekly_digest=True)
        recent = [alert(alert_type="weekly_digest", convocatoria_id=None, scheduled_for="2025-06-12T09:00:00")]
        old = [alert(alert_type="weekly_digest", convocatoria_id=None, scheduled_for="2025-06-02T09:00:00")]

        assert select_deadline_alerts("u1", records(), prefs, recent, MONDAY) == []
        assert len(select_deadline_alerts("u1", records(), prefs, old, MONDAY)) == 1


class TestTransitions:
    def test_due_alerts_only_pending_and_past(self):
        alerts = [
            alert(id="late", scheduled_for="2025-06-15T09:00:00"),
            alert(id="future", scheduled_for="2025-06-15T11:00:00"),
            alert(id="sent", status="sent", scheduled_for="2025-06-14T09:00:00"),
            alert(id="early", scheduled_for="2025-06-14T09:00:00+00:00"),
        ]
        assert [a.id for a in due_alerts(alerts, NOW)] == ["early", "late"]

    def test_mark_sent(self):
        sent = mark_sent(alert(), NOW)
        assert sent.status == "sent"
        assert sent.sent_at == NOW.isoformat()

    def test_mark_failed(self):
        failed = mark_failed(alert(), "Email de usuario no encontrado")
        assert failed.status == "failed"
        assert failed.error_message == "Email de usuario no encontrado"

    @pytest.mark.parametrize("status", ["sent", "failed"])
    def test_no_transition_out_of_final_states(self, status):
        with pytest.raises(InvalidRequestError):
            mark_sent(alert(status=status), NOW)
        with pytest.raises(InvalidRequestError):
            mark_failed(alert(status=status), "x")

    def test_expired_alerts(self):
        alerts = [
            alert(id="old", status="sent", sent_at="2025-05-01T00:00:00"),
            alert(id="new", status="sent", sent_at="2025-06-10T00:00:00"),
            alert(id="pending"),
        ]
        assert [a.id for a in expired_alerts(alerts, NOW)] == ["old"]


class TestAlertService:
    def test_schedule_persists_and_is_idempotent(self):
        persistence = FakePersistence(records=RECORDS)
        service = AlertService(persistence, clock=lambda: NOW)

        first = service.schedule("u1", AlertPreferences())
        second = service.schedule("u1", AlertPreferences())

        assert len(first) == 2
        assert all(a.id for a in first)
        assert second == []
        assert [table for table, _ in persistence.inserted] == ["scheduled_alerts", "scheduled_alerts"]

    def test_pending_and_record_delivery(self):
        persistence = FakePersistence(records=RECORDS)
        service = AlertService(persistence, clock=lambda: NOW)
        created = service.schedule("u1", AlertPreferences())

        pending = service.pending("u1")
        assert {a.id for a in pending} == {a.id for a in created}

        sent = service.record_delivery(pending[0])
        failed = service.record_delivery(pending[1], error="Resend API error: 500")

        assert sent.status == "sent"
        assert failed.status == "failed"
        assert persistence.updated[0][1] == {"id": pending[0].id}
        assert service.pending("u1") == []
