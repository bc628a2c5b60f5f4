"""Tests for the Supabase REST adapter with a mocked session."""

from unittest.mock import MagicMock

import pytest
import requests

from storage import SupabaseClient
from utils.errors import AuthenticationError, PersistenceError


def response(status_code=200, json_data=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.json.return_value = json_data
    resp.text = text
    resp.content = b"x" if json_data is not None else b""
    return resp


def make_client(session):
    return SupabaseClient("https://proyecto.supabase.co/", "service-key", session=session)


class TestConstruction:
    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            SupabaseClient("", "key")
        with pytest.raises(ValueError):
            SupabaseClient("https://x.supabase.co", "")


class TestAuth:
    def test_get_user(self):
        session = MagicMock()
        session.get.return_value = response(json_data={"id": "u1", "email": "a@b.cl"})

        user = make_client(session).get_user("jwt")

        assert user["id"] == "u1"
        url = session.get.call_args.args[0]
        assert url == "https://proyecto.supabase.co/auth/v1/user"
        assert session.get.call_args.kwargs["headers"]["Authorization"] == "Bearer jwt"

    def test_invalid_token(self):
        session = MagicMock()
        session.get.return_value = response(status_code=401, json_data={"msg": "invalid JWT"})
        with pytest.raises(AuthenticationError):
            make_client(session).get_user("jwt")

    def test_empty_token(self):
        with pytest.raises(AuthenticationError):
            make_client(MagicMock()).get_user("")


class TestTables:
    def test_profile_plan(self):
        session = MagicMock()
        session.request.return_value = response(json_data=[{"plan": "pro_annual"}])
        assert make_client(session).get_profile_plan("u1") == "pro_annual"
        assert session.request.call_args.kwargs["params"]["id"] == "eq.u1"

    def test_profile_missing_defaults_to_free(self):
        session = MagicMock()
        session.request.return_value = response(json_data=[])
        assert make_client(session).get_profile_plan("u1") == "free"

    def test_list_convocatorias(self):
        session = MagicMock()
        session.request.return_value = response(json_data=[
            {"id": 7, "nombre_concurso": "Fondo", "institucion": "CORFO", "fecha_cierre": "2025-10-01",
             "user_id": "u1", "created_at": "2025-06-01T00:00:00"},
        ])
        records = make_client(session).list_convocatorias("u1")

        assert records[0].id == "7"
        assert records[0].institucion == "CORFO"
        method, url = session.request.call_args.args
        assert method == "GET"
        assert url.endswith("/rest/v1/convocatorias")
        assert session.request.call_args.kwargs["params"]["order"] == "created_at.desc"

    def test_update_rows_builds_filters(self):
        session = MagicMock()
        session.request.return_value = response(json_data=[{"id": "3"}])
        make_client(session).update_convocatoria("3", "u1", {"estado": "cerrado"})

        kwargs = session.request.call_args.kwargs
        assert session.request.call_args.args[0] == "PATCH"
        assert kwargs["params"] == {"id": "eq.3", "user_id": "eq.u1"}
        assert kwargs["json"] == {"estado": "cerrado"}
        assert kwargs["headers"]["Prefer"] == "return=representation"

    def test_list_rows_builds_filters(self):
        session = MagicMock()
        session.request.return_value = response(json_data=[{"id": "s1", "search_name": "Fondos"}])

        rows = make_client(session).list_rows("saved_searches", {"user_id": "u1", "search_name": "Fondos"})

        assert rows[0]["id"] == "s1"
        assert session.request.call_args.args == ("GET", "https://proyecto.supabase.co/rest/v1/saved_searches")
        assert session.request.call_args.kwargs["params"] == {
            "user_id": "eq.u1", "search_name": "eq.Fondos", "select": "*",
        }

    def test_http_error_is_persistence_error(self):
        session = MagicMock()
        session.request.return_value = response(status_code=500, text="boom")
        with pytest.raises(PersistenceError):
            make_client(session).insert_row("ai_searches", {"query": "x"})

    def test_connection_error_is_persistence_error(self):
        session = MagicMock()
        session.request.side_effect = requests.exceptions.ConnectionError("sin red")
        with pytest.raises(PersistenceError):
            make_client(session).list_convocatorias("u1")
