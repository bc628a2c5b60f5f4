"""Tests for rule-based and AI-assisted field validation."""

from datetime import date

from conftest import StubGateway
from llm import LLMGatewayError
from models import Convocatoria
from services.validation_service import AI_UNAVAILABLE_WARNING, FIX_REQUIRED_SUGGESTION, ValidationService

TODAY = date(2025, 1, 1)

REQUIRED_ONLY = {"nombre_concurso": "Fondo de Innovación", "institucion": "CORFO", "fecha_cierre": "2025-12-31"}

ALL_OPTIONALS = {
    "descripcion": "Financia proyectos de innovación tecnológica",
    "monto_financiamiento": "Hasta $50.000.000",
    "requisitos": "Empresas chilenas con inicio de actividades",
    "contacto": "contacto@corfo.cl",
    "sitio_web": "https://corfo.cl",
    "area": "innovación",
}


def make(**fields):
    return Convocatoria(**fields)


class TestLocalScoring:
    def test_required_only_scores_75(self):
        outcome = ValidationService(today=TODAY).validate(make(**REQUIRED_ONLY))
        assert outcome.is_valid is True
        assert outcome.score == 75
        assert outcome.errors == []

    def test_all_optionals_add_30(self):
        score, errors, _ = ValidationService(today=TODAY).validate_local(make(**REQUIRED_ONLY, **ALL_OPTIONALS))
        assert score == 100
        assert errors == []

    def test_short_description_not_counted(self):
        score, _, _ = ValidationService(today=TODAY).validate_local(make(**REQUIRED_ONLY, descripcion="Corta"))
        assert score == 75

    def test_missing_organization_caps_score(self):
        fields = dict(REQUIRED_ONLY, **ALL_OPTIONALS)
        del fields["institucion"]
        gateway = StubGateway({"data_quality": 1.0})

        outcome = ValidationService(gateway=gateway, today=TODAY).validate(make(**fields))

        assert outcome.is_valid is False
        assert outcome.score <= 30
        assert outcome.suggestions == [FIX_REQUIRED_SUGGESTION]
        assert gateway.call_count == 0

    def test_short_name_is_error(self):
        outcome = ValidationService(today=TODAY).validate(make(**dict(REQUIRED_ONLY, nombre_concurso="ab")))
        assert outcome.is_valid is False
        assert any("Nombre" in e for e in outcome.errors)

    def test_bad_date_format(self):
        outcome = ValidationService(today=TODAY).validate(make(**dict(REQUIRED_ONLY, fecha_cierre="31-12-2025")))
        assert outcome.is_valid is False
        assert "Fecha de cierre debe estar en formato YYYY-MM-DD" in outcome.errors

    def test_impossible_calendar_date(self):
        outcome = ValidationService(today=TODAY).validate(make(**dict(REQUIRED_ONLY, fecha_cierre="2025-02-30")))
        assert outcome.is_valid is False

    def test_missing_date(self):
        fields = dict(REQUIRED_ONLY)
        del fields["fecha_cierre"]
        outcome = ValidationService(today=TODAY).validate(make(**fields))
        assert "Fecha de cierre es obligatoria" in outcome.errors

    def test_past_date_warns_without_penalty(self):
        outcome = ValidationService(today=date(2026, 6, 1)).validate(make(**REQUIRED_ONLY))
        assert outcome.score == 75
        assert outcome.is_valid is True
        assert "La fecha de cierre parece estar en el pasado" in outcome.warnings

    def test_serialized_with_client_keys(self):
        outcome = ValidationService(today=TODAY).validate(make(**REQUIRED_ONLY))
        data = outcome.model_dump(by_alias=True)
        assert data["isValid"] is True
        assert "is_valid" not in data


class TestAIValidation:
    def test_scores_averaged(self):
        gateway = StubGateway({
            "data_quality": 0.85,
            "warnings": ["El monto no está especificado"],
            "suggestions": ["Agregar sitio web"],
            "improvements": [
                {"field": "monto_financiamiento", "suggested_value": "Hasta $50.000.000", "reason": "Dato de las bases"}
            ],
        })
        outcome = ValidationService(gateway=gateway, today=TODAY).validate(make(**REQUIRED_ONLY))

        assert gateway.call_count == 1
        assert outcome.score == 80
        assert outcome.is_valid is True
        assert "El monto no está especificado" in outcome.warnings
        assert outcome.suggestions == ["Agregar sitio web"]
        assert outcome.improvements[0].field == "monto_financiamiento"

    def test_low_quality_invalidates(self):
        gateway = StubGateway({"data_quality": 0.2})
        outcome = ValidationService(gateway=gateway, today=TODAY).validate(make(**REQUIRED_ONLY))
        assert outcome.score == 48
        assert outcome.is_valid is False

    def test_percentage_quality_scaled(self):
        gateway = StubGateway({"data_quality": 85})
        outcome = ValidationService(gateway=gateway, today=TODAY).validate(make(**REQUIRED_ONLY))
        assert outcome.score == 80

    def test_gateway_failure_keeps_local_score(self):
        gateway = StubGateway(error=LLMGatewayError("HTTP 500", provider="openrouter", status_code=500))
        outcome = ValidationService(gateway=gateway, today=TODAY).validate(make(**REQUIRED_ONLY))
        assert outcome.score == 75
        assert outcome.is_valid is True
        assert AI_UNAVAILABLE_WARNING in outcome.warnings

    def test_unparsable_output_keeps_local_score(self):
        gateway = StubGateway("no es json")
        outcome = ValidationService(gateway=gateway, today=TODAY).validate(make(**REQUIRED_ONLY))
        assert outcome.score == 75
        assert outcome.is_valid is True
        assert AI_UNAVAILABLE_WARNING in outcome.warnings

    def test_validation_prompt_contains_candidate(self):
        gateway = StubGateway({"data_quality": 0.9})
        ValidationService(gateway=gateway, today=TODAY).validate(make(**REQUIRED_ONLY))
        assert "Fondo de Innovación" in gateway.calls[0]["user_prompt"]
        assert gateway.calls[0]["max_tokens"] == 2000
