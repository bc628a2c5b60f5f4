"""
Modelo de datos para convocatorias de financiamiento

Define la estructura de una convocatoria tal como la extrae el LLM
(candidata, aún sin validar) y tal como queda persistida en el BaaS.
Campos obligatorios a nivel de sistema:
- Nombre del concurso
- Institución convocante
- Fecha de cierre en formato YYYY-MM-DD
"""

import re
from typing import Optional, Literal, Any
from pydantic import BaseModel, Field, ConfigDict, field_validator

EstadoConvocatoria = Literal["abierto", "cerrado", "en_evaluacion", "finalizado"]

ESTADOS_VALIDOS = ("abierto", "cerrado", "en_evaluacion", "finalizado")

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_TEXT_FIELDS = (
    "nombre_concurso",
    "institucion",
    "fecha_cierre",
    "fecha_apertura",
    "fecha_resultados",
    "monto_financiamiento",
    "requisitos",
    "descripcion",
    "contacto",
    "sitio_web",
    "area",
    "tipo_fondo",
    "fuente",
)


class Convocatoria(BaseModel):
    """
    Convocatoria candidata extraída por el LLM.

    Todos los campos son opcionales en el modelo: la obligatoriedad de
    nombre_concurso, institucion y fecha_cierre se verifica con
    `is_valid_candidate()` y con el validador de campos, de modo que una
    respuesta incompleta del LLM no se pierde antes de poder informarla.
    """

    nombre_concurso: Optional[str] = Field(None, description="Nombre oficial del concurso o convocatoria")
    institucion: Optional[str] = Field(None, description="Organización que convoca (CORFO, SERCOTEC, ANID, etc.)")
    fecha_cierre: Optional[str] = Field(None, description="Fecha límite de postulación en formato YYYY-MM-DD")
    fecha_apertura: Optional[str] = Field(None, description="Fecha de inicio en formato YYYY-MM-DD")
    fecha_resultados: Optional[str] = Field(None, description="Fecha de publicación de resultados en formato YYYY-MM-DD")
    monto_financiamiento: Optional[str] = Field(None, description="Monto en pesos chilenos o descripción del financiamiento")
    requisitos: Optional[str] = Field(None, description="Requisitos principales de postulación")
    estado: Optional[EstadoConvocatoria] = Field(None, description="abierto, cerrado, en_evaluacion o finalizado")
    descripcion: Optional[str] = Field(None, description="Resumen de la convocatoria")
    contacto: Optional[str] = Field(None, description="Email o teléfono de contacto")
    sitio_web: Optional[str] = Field(None, description="URL oficial")
    area: Optional[str] = Field(None, description="Área temática (tecnología, innovación, cultura, etc.)")
    tipo_fondo: Optional[str] = Field(None, description="Tipo de financiamiento (subsidio, crédito, capital semilla)")
    fuente: Optional[str] = Field(None, description="Origen de la información (URL o nombre del documento)")

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "nombre_concurso": "Fondo de Innovación",
                "institucion": "CORFO",
                "fecha_cierre": "2025-12-31",
                "monto_financiamiento": "Hasta $50.000.000",
                "estado": "abierto",
            }
        },
    )

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        # El LLM a veces entrega montos como número o requisitos como lista
        if value is None:
            return None
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, list):
            parts = [str(v).strip() for v in value if v is not None and str(v).strip()]
            return "; ".join(parts) if parts else None
        if isinstance(value, str):
            return value
        return None

    @field_validator("estado", mode="before")
    @classmethod
    def _coerce_estado(cls, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower().replace(" ", "_")
        return normalized if normalized in ESTADOS_VALIDOS else None

    def is_valid_candidate(self) -> bool:
        """
        Una candidata es válida si tiene nombre, institución y fecha de
        cierre, y la fecha de cierre tiene formato YYYY-MM-DD.
        """
        if not (self.nombre_concurso and self.nombre_concurso.strip()):
            return False
        if not (self.institucion and self.institucion.strip()):
            return False
        if not self.fecha_cierre:
            return False
        return bool(ISO_DATE_PATTERN.match(self.fecha_cierre.strip()))


class StoredConvocatoria(Convocatoria):
    """
    Convocatoria persistida en el BaaS (tabla `convocatorias`).
    """

    id: str = Field(..., description="Identificador asignado por el almacenamiento")
    user_id: Optional[str] = Field(None, description="Dueño de la convocatoria")
    created_at: Optional[str] = Field(None, description="Fecha de creación (ISO 8601)")
    updated_at: Optional[str] = Field(None, description="Fecha de última actualización (ISO 8601)")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)
