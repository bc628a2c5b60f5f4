"""
Modelos para la vista previa enriquecida de convocatorias (plan Pro)
"""

from typing import List, Literal, Any
from pydantic import BaseModel, Field, field_validator

Level = Literal["low", "medium", "high"]

_LEVEL_ALIASES = {
    "low": "low",
    "baja": "low",
    "bajo": "low",
    "medium": "medium",
    "media": "medium",
    "medio": "medium",
    "moderate": "medium",
    "high": "high",
    "alta": "high",
    "alto": "high",
}


def coerce_level(value: Any, default: str = "medium") -> str:
    """Normaliza niveles en español o inglés a low/medium/high"""
    if not isinstance(value, str):
        return default
    return _LEVEL_ALIASES.get(value.strip().lower(), default)


def _coerce_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(v) for v in value if v is not None and str(v).strip()]
    return []


class TimelineEvent(BaseModel):
    """Evento del cronograma de una convocatoria"""
    date: str = Field(..., description="Fecha del evento en formato YYYY-MM-DD")
    event: str = Field(..., description="Descripción del evento")
    importance: Level = "medium"

    @field_validator("importance", mode="before")
    @classmethod
    def _coerce_importance(cls, value: Any) -> str:
        return coerce_level(value)


class RiskAssessment(BaseModel):
    """Evaluación de riesgo de postular"""
    level: Level = "medium"
    factors: List[str] = Field(default_factory=list)

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_risk_level(cls, value: Any) -> str:
        return coerce_level(value)

    @field_validator("factors", mode="before")
    @classmethod
    def _coerce_factors(cls, value: Any) -> List[str]:
        return _coerce_str_list(value)


class EnrichmentResult(BaseModel):
    """
    Vista previa enriquecida generada por el LLM.

    `fallback` es True cuando el resultado se construyó localmente desde los
    campos de la convocatoria porque el LLM falló o respondió algo ilegible.
    """
    enhanced_description: str = ""
    key_points: List[str] = Field(default_factory=list)
    timeline: List[TimelineEvent] = Field(default_factory=list)
    requirements_summary: List[str] = Field(default_factory=list)
    estimated_competition: Level = "medium"
    target_audience: List[str] = Field(default_factory=list)
    success_tips: List[str] = Field(default_factory=list)
    similar_opportunities: List[str] = Field(default_factory=list)
    risk_assessment: RiskAssessment = Field(default_factory=RiskAssessment)
    fallback: bool = False

    @field_validator("estimated_competition", mode="before")
    @classmethod
    def _coerce_competition(cls, value: Any) -> str:
        return coerce_level(value)

    @field_validator(
        "key_points",
        "requirements_summary",
        "target_audience",
        "success_tips",
        "similar_opportunities",
        mode="before",
    )
    @classmethod
    def _coerce_lists(cls, value: Any) -> List[str]:
        return _coerce_str_list(value)

    @field_validator("enhanced_description", mode="before")
    @classmethod
    def _coerce_description(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""
