"""
Modelos del pipeline de parsing asistido por IA
"""

from typing import Optional, List, Literal
from pydantic import BaseModel, Field

from models.convocatoria import Convocatoria

SourceKind = Literal["file", "clipboard", "url"]


class RawInput(BaseModel):
    """Entrada cruda de una acción del usuario (archivo, portapapeles o URL)"""
    content: str = Field("", description="Texto a analizar (o la URL si source_kind es url)")
    source_kind: SourceKind = Field("clipboard", description="Origen del contenido")
    mime_hint: Optional[str] = Field(None, description="Tipo de archivo informado por el cliente (pdf, txt, html...)")


class PromptPayload(BaseModel):
    """Prompt acotado listo para enviar al LLM"""
    system_prompt: str
    user_prompt: str
    truncated: bool = Field(False, description="True si el contenido se recortó al límite de contexto")
    original_length: int = Field(0, description="Largo del contenido antes de recortar")
    content_length: int = Field(0, description="Largo del contenido enviado")


class ExtractionResult(BaseModel):
    """
    Resultado etiquetado del extractor.

    - kind="ok": candidatas reales obtenidas de la respuesta del LLM
    - kind="degraded": un único registro sintético porque la respuesta no
      pudo interpretarse; `reason` explica por qué
    """
    kind: Literal["ok", "degraded"]
    candidates: List[Convocatoria] = Field(default_factory=list)
    confidence: int = Field(0, ge=0, le=100)
    reason: Optional[str] = None

    @classmethod
    def ok(cls, candidates: List[Convocatoria], confidence: int) -> "ExtractionResult":
        return cls(kind="ok", candidates=candidates, confidence=confidence)

    @classmethod
    def degraded(cls, fallback: Convocatoria, confidence: int, reason: str) -> "ExtractionResult":
        return cls(kind="degraded", candidates=[fallback], confidence=confidence, reason=reason)

    @property
    def is_degraded(self) -> bool:
        return self.kind == "degraded"


class ParseOutcome(BaseModel):
    """Respuesta del pipeline de parsing"""
    success: bool
    convocatorias: List[Convocatoria] = Field(default_factory=list)
    confidence: int = Field(0, ge=0, le=100)
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    message: Optional[str] = None
    truncated: bool = False
    degraded: bool = False
    error_code: Optional[str] = Field(None, description="Código de error legible por máquina cuando success es False")
