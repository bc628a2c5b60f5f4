"""Tests for content cleaning, truncation and URL text extraction."""

from unittest.mock import MagicMock

import pytest
import requests

from ingest import ContentNormalizer, UrlFetcher, clean_text_for_llm, extract_text_content, normalize
from models import RawInput
from utils.errors import EmptyContentError, InvalidRequestError


class TestCleanText:
    def test_removes_control_chars_and_separator_lines(self):
        text = "Hola\x00 mundo\n-----\n\n\n\nLinea"
        assert clean_text_for_llm(text) == "Hola mundo\n\nLinea"

    def test_collapses_spaces_and_tabs(self):
        assert clean_text_for_llm("Fondo\t\tCORFO    2025") == "Fondo CORFO 2025"

    def test_keeps_image_alt_text(self):
        assert clean_text_for_llm("![Logo CORFO](http://x/logo.png)") == "Logo CORFO"

    def test_empty(self):
        assert clean_text_for_llm("") == ""


class TestNormalize:
    def test_empty_content_raises(self):
        with pytest.raises(EmptyContentError):
            normalize(RawInput(content=""))

    def test_whitespace_content_raises(self):
        with pytest.raises(EmptyContentError):
            normalize(RawInput(content="   \n\t  "))

    def test_separator_only_content_raises(self):
        with pytest.raises(EmptyContentError):
            normalize(RawInput(content="------\n======"))

    def test_short_content_not_truncated(self):
        payload = normalize(RawInput(content="CORFO abre el Fondo de Innovación", source_kind="file", mime_hint="pdf"))
        assert payload.truncated is False
        assert payload.content_length == payload.original_length
        assert "CORFO abre el Fondo de Innovación" in payload.user_prompt
        assert "pdf" in payload.user_prompt
        assert "nombre_concurso" in payload.system_prompt

    def test_long_content_truncated_to_limit(self):
        payload = normalize(RawInput(content="a" * 9000))
        assert payload.truncated is True
        assert payload.original_length == 9000
        assert payload.content_length == 8000
        assert "a" * 8000 in payload.user_prompt
        assert "a" * 8001 not in payload.user_prompt

    def test_custom_limit(self):
        normalizer = ContentNormalizer({"max_content_chars": 10})
        payload = normalizer.normalize(RawInput(content="0123456789ABC"))
        assert payload.truncated is True
        assert payload.content_length == 10


class TestUrlFetcher:
    def test_extract_text_content_drops_scripts_and_nav(self):
        html = (
            "<html><body><nav>Inicio | Contacto</nav><script>var x=1;</script>"
            "<h1>Fondo Semilla</h1><p>Cierre: 2025-10-01</p><footer>Pie</footer></body></html>"
        )
        text = extract_text_content(html)
        assert "Fondo Semilla" in text
        assert "2025-10-01" in text
        assert "var x" not in text
        assert "Inicio" not in text
        assert "Pie" not in text

    def test_fetch_html_page(self):
        session = MagicMock()
        response = MagicMock(status_code=200, text="<html><body><p>Convocatoria ANID</p></body></html>")
        response.headers = {"Content-Type": "text/html; charset=utf-8"}
        session.get.return_value = response

        text = UrlFetcher(session=session).fetch_text("https://anid.cl/concursos")
        assert text == "Convocatoria ANID"
        assert session.get.call_args[0][0] == "https://anid.cl/concursos"

    def test_fetch_plain_text(self):
        session = MagicMock()
        response = MagicMock(status_code=200, text="Texto plano")
        response.headers = {"Content-Type": "text/plain"}
        session.get.return_value = response
        assert UrlFetcher(session=session).fetch_text("https://example.cl/a.txt") == "Texto plano"

    def test_invalid_url(self):
        with pytest.raises(InvalidRequestError):
            UrlFetcher(session=MagicMock()).fetch_text("ftp://example.cl")

    def test_http_error(self):
        session = MagicMock()
        response = MagicMock(status_code=404, text="not found")
        response.headers = {}
        session.get.return_value = response
        with pytest.raises(InvalidRequestError):
            UrlFetcher(session=session).fetch_text("https://example.cl/x")

    def test_connection_error(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("sin red")
        with pytest.raises(InvalidRequestError):
            UrlFetcher(session=session).fetch_text("https://example.cl/x")
