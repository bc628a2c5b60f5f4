"""Shared fixtures: stub LLM gateway and in-memory persistence."""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest

from llm import LLMGatewayError
from models import StoredConvocatoria
from utils.errors import AuthenticationError, PersistenceError


class StubGateway:
    """Gateway that returns canned responses and counts calls."""

    def __init__(self, responses=None, error: Optional[Exception] = None):
        if responses is None:
            responses = []
        elif isinstance(responses, (str, dict)):
            responses = [responses]
        self.responses = list(responses)
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def complete(self, system_prompt, user_prompt, temperature=0.1, max_tokens=4000, title=None):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "title": title,
        })
        if self.error is not None:
            raise self.error
        response = self.responses.pop(0) if len(self.responses) > 1 else (self.responses[0] if self.responses else "")
        if isinstance(response, (dict, list)):
            return json.dumps(response)
        return response


class FakePersistence:
    """In-memory stand-in for the Supabase adapter."""

    def __init__(self, records=None, users=None, plans=None):
        self.records = [StoredConvocatoria.model_validate(r) for r in (records or [])]
        self.users = users or {"token-pro": {"id": "user-pro", "email": "pro@example.cl"},
                               "token-free": {"id": "user-free", "email": "free@example.cl"}}
        self.plans = plans or {"user-pro": "pro_monthly", "user-free": "free"}
        self.inserted: List[tuple] = []
        self.updated: List[tuple] = []
        self.plan_updates: List[tuple] = []
        self.fail_tables = set()
        self.tables: Dict[str, List[dict]] = {}

    def get_user(self, token):
        user = self.users.get(token)
        if user is None:
            raise AuthenticationError("Usuario no autenticado")
        return user

    def get_profile_plan(self, user_id):
        return self.plans.get(user_id, "free")

    def list_convocatorias(self, user_id):
        return list(self.records)

    def insert_row(self, table, row):
        if table in self.fail_tables:
            raise PersistenceError(f"Error del almacenamiento en {table}")
        self.inserted.append((table, row))
        stored = dict(row, id=row.get("id") or len(self.inserted))
        self.tables.setdefault(table, []).append(stored)
        return [stored]

    def list_rows(self, table, match):
        if table in self.fail_tables:
            raise PersistenceError(f"Error del almacenamiento en {table}")
        rows = self.tables.get(table, [])
        return [dict(r) for r in rows if all(str(r.get(k)) == str(v) for k, v in match.items())]

    def insert_convocatoria(self, row):
        return self.insert_row("convocatorias", row)

    def update_rows(self, table, match, data):
        if table in self.fail_tables:
            raise PersistenceError(f"Error del almacenamiento en {table}")
        self.updated.append((table, match, data))
        for r in self.tables.get(table, []):
            if all(str(r.get(k)) == str(v) for k, v in match.items()):
                r.update(data)
        return [dict(data, **match)]

    def update_convocatoria(self, convocatoria_id, user_id, data):
        return self.update_rows("convocatorias", {"id": convocatoria_id, "user_id": user_id}, data)

    def update_profile_plan(self, user_id, plan_id, expires_at):
        self.plan_updates.append((user_id, plan_id, expires_at))
        return [{"id": user_id, "plan": plan_id, "plan_expires_at": expires_at}]


CORFO_TEXT = "CORFO abre el Fondo de Innovación, cierre 2025-12-31"

CORFO_RESPONSE = {
    "convocatorias": [
        {"nombre_concurso": "Fondo de Innovación", "institucion": "CORFO", "fecha_cierre": "2025-12-31"}
    ],
    "confidence": 90,
}


@pytest.fixture
def corfo_gateway():
    return StubGateway(CORFO_RESPONSE)


@pytest.fixture
def failing_gateway():
    return StubGateway(error=LLMGatewayError("Error en OpenRouter: 500", provider="openrouter", status_code=500))


@pytest.fixture
def now():
    return datetime(2025, 6, 15, 10, 0, 0)


@pytest.fixture
def sample_records():
    return [
        {"id": 1, "nombre_concurso": "Fondo A", "institucion": "CORFO", "fecha_cierre": "2025-06-18",
         "estado": "abierto", "created_at": "2025-06-01T12:00:00"},
        {"id": 2, "nombre_concurso": "Fondo B", "institucion": "ANID", "fecha_cierre": "2025-07-05",
         "fecha_apertura": "2025-06-20", "estado": "abierto", "created_at": "2025-05-10T09:00:00"},
        {"id": 3, "nombre_concurso": "Fondo C", "institucion": "CORFO", "fecha_cierre": "2025-09-30",
         "fecha_resultados": "2025-11-15", "estado": "cerrado", "created_at": "2025-03-02T08:00:00"},
        {"id": 4, "nombre_concurso": "Fondo D", "institucion": "SERCOTEC", "fecha_cierre": "2025-05-01",
         "created_at": "2024-11-20T08:00:00"},
    ]


@pytest.fixture
def persistence(sample_records):
    return FakePersistence(records=sample_records)
