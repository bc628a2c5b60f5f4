"""
Modelos para la validación de convocatorias
"""

from typing import List, Any
from pydantic import BaseModel, Field, ConfigDict, field_validator


class Improvement(BaseModel):
    """Mejora sugerida para un campo de la convocatoria"""
    field: str
    suggested_value: str = ""
    reason: str = ""

    @field_validator("suggested_value", "reason", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)


class ValidationOutcome(BaseModel):
    """
    Resultado de validar una convocatoria candidata.

    Se serializa con las claves del cliente web (`isValid`).
    """
    is_valid: bool = Field(..., alias="isValid")
    score: int = Field(0, ge=0, le=100)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    improvements: List[Improvement] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class AIValidation(BaseModel):
    """
    Respuesta esperada del LLM en la validación avanzada.
    """
    data_quality: float = Field(..., ge=0, le=1, description="Calidad de los datos entre 0 y 1")
    warnings: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    improvements: List[Improvement] = Field(default_factory=list)

    @field_validator("data_quality", mode="before")
    @classmethod
    def _scale_quality(cls, value: Any) -> Any:
        # Algunos modelos responden en porcentaje (85) en vez de fracción (0.85)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and 1 < value <= 100:
            return value / 100
        return value

    @field_validator("warnings", "suggestions", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return [str(v) for v in value if v]
