"""
Extractor de convocatorias desde la respuesta libre del LLM

La respuesta del LLM no está garantizada como JSON bien formado. El extractor
intenta interpretarla en dos pasos y, si no lo logra, entrega un registro
sintético de baja confianza en vez de propagar la excepción.
"""

import json
import math
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from config import PARSER_CONFIG
from models import Convocatoria, ExtractionResult

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*\n?|```", re.IGNORECASE)
# Primer '{' hasta el último '}': basta para respuestas con texto alrededor del JSON
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

FALLBACK_NAME = "Convocatoria sin identificar"


def load_json_payload(text: Optional[str]) -> Tuple[Optional[Any], Optional[str]]:
    """
    Intenta obtener un JSON desde texto libre del LLM.

    Orden: texto completo, texto sin bloques ```json, primer objeto {...}.

    Returns:
        Tupla (datos, None) si se pudo parsear, o (None, motivo) si no
    """
    if not text or not text.strip():
        return None, "Respuesta vacía del LLM"

    trimmed = text.strip()
    candidates = [trimmed]
    without_fences = _CODE_FENCE_RE.sub("", trimmed).strip()
    if without_fences != trimmed:
        candidates.append(without_fences)

    for candidate in candidates:
        try:
            return _not_null(json.loads(candidate))
        except ValueError:
            pass

    match = _JSON_OBJECT_RE.search(without_fences)
    if match:
        try:
            return _not_null(json.loads(match.group(0)))
        except ValueError as e:
            logger.warning(f"Objeto JSON encontrado pero inválido: {e}")
            return None, f"JSON inválido en la respuesta del LLM: {e}"

    return None, "La respuesta del LLM no contiene JSON"


def _not_null(data: Any) -> Tuple[Optional[Any], Optional[str]]:
    # `null` es JSON válido pero no trae datos
    if data is None:
        return None, "La respuesta del LLM es null"
    return data, None


def normalize_confidence(value: Any, default: Optional[int] = None) -> int:
    """
    Convierte la confianza informada por el LLM a un entero 0..100.

    Valores entre 0 y 1 se interpretan como fracción.
    """
    if default is None:
        default = PARSER_CONFIG["default_confidence"]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        if isinstance(value, str):
            try:
                value = float(value.strip().rstrip("%"))
            except ValueError:
                return default
        else:
            return default
    if math.isnan(value):
        return default
    if 0 <= value <= 1:
        value = value * 100
    return int(round(min(max(value, 0), 100)))


class ResultExtractor:
    """
    Convierte el texto del LLM en un ExtractionResult etiquetado.

    - ok: se obtuvo la lista `convocatorias` (o un array directo)
    - degraded: un registro sintético que lleva el contexto original como nombre
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or PARSER_CONFIG

    def extract(self, llm_text: Optional[str], context: str = "") -> ExtractionResult:
        """
        Args:
            llm_text: Texto de respuesta del LLM
            context: Consulta o contenido original (se usa como nombre del fallback)

        Returns:
            ExtractionResult ok o degraded
        """
        data, reason = load_json_payload(llm_text)
        if data is None:
            logger.warning(f"No se pudo parsear la respuesta del LLM: {reason}")
            logger.debug(f"Respuesta recibida (primeros 1000 chars): {(llm_text or '')[:1000]}")
            return self._fallback(context, reason)

        raw_confidence = None
        if isinstance(data, list):
            logger.info("Respuesta es un array directo, normalizando a estructura esperada")
            items = data
        elif isinstance(data, dict) and isinstance(data.get("convocatorias"), list):
            items = data["convocatorias"]
            raw_confidence = data.get("confidence")
        else:
            logger.warning(f"Respuesta no tiene estructura esperada. Tipo: {type(data).__name__}, Contenido: {str(data)[:200]}")
            return self._fallback(context, "La respuesta del LLM no contiene el campo 'convocatorias'")

        candidates = self._to_candidates(items)
        return ExtractionResult.ok(candidates, normalize_confidence(raw_confidence, self.config.get("default_confidence")))

    def _to_candidates(self, items: List[Any]) -> List[Convocatoria]:
        candidates = []
        for item in items:
            if not isinstance(item, dict):
                logger.warning(f"Elemento ignorado (no es objeto): {str(item)[:100]}")
                continue
            try:
                candidates.append(Convocatoria.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Error al validar convocatoria: {e}. Datos: {item}")
        return candidates

    def _fallback(self, context: str, reason: str) -> ExtractionResult:
        fallback = Convocatoria(
            nombre_concurso=self._fallback_name(context),
            descripcion="Registro generado automáticamente: la respuesta de la IA no pudo interpretarse.",
        )
        return ExtractionResult.degraded(
            fallback,
            confidence=self.config.get("fallback_confidence", 10),
            reason=reason,
        )

    def _fallback_name(self, context: str) -> str:
        for line in (context or "").splitlines():
            stripped = line.strip()
            if stripped:
                return stripped[: self.config.get("fallback_name_max_chars", 120)]
        return FALLBACK_NAME
