"""
Servicio de parsing asistido por IA

Orquesta el proceso completo:
1. Normalización del contenido (recorte al límite de contexto)
2. Una llamada al gateway LLM
3. Interpretación de la respuesta (ok o degradada)
4. Filtrado de candidatas con nombre, institución y fecha de cierre válidas

Nunca propaga excepciones: toda falla termina en un ParseOutcome con
success=False, errores legibles y un error_code.
"""

import logging
from typing import Optional, Dict, Any, List, Tuple

from config import LLM_CONFIG, PARSER_CONFIG
from ingest import ContentNormalizer, UrlFetcher
from llm import LLMGateway, LLMGatewayError, LLMEmptyResponseError
from llm.extractors import ResultExtractor
from models import RawInput, ParseOutcome, Convocatoria, ExtractionResult
from models.convocatoria import ISO_DATE_PATTERN
from utils.errors import ConvocatoriasError, LLMCallFailedError, LLMOutputUnparsableError

logger = logging.getLogger(__name__)

NO_VALID_CANDIDATES_ERROR = "No se encontraron convocatorias válidas en el contenido"


class ParsingService:
    """
    Pipeline contenido crudo -> convocatorias candidatas.

    El gateway se inyecta explícitamente; en tests se reemplaza por un stub.
    """

    def __init__(
        self,
        gateway: LLMGateway,
        normalizer: Optional[ContentNormalizer] = None,
        extractor: Optional[ResultExtractor] = None,
        url_fetcher: Optional[UrlFetcher] = None,
        parser_config: Optional[Dict[str, Any]] = None,
    ):
        self.gateway = gateway
        self.parser_config = parser_config or PARSER_CONFIG
        self.normalizer = normalizer or ContentNormalizer(self.parser_config)
        self.extractor = extractor or ResultExtractor(self.parser_config)
        self.url_fetcher = url_fetcher or UrlFetcher()
        self.task_config = LLM_CONFIG["tasks"]["parse"]

    def parse(self, raw: RawInput) -> ParseOutcome:
        """
        Ejecuta el pipeline completo sobre una entrada.

        Args:
            raw: Contenido crudo con su origen

        Returns:
            ParseOutcome (nunca lanza excepciones de dominio ni del gateway)
        """
        try:
            raw = self._resolve_url(raw)
            payload = self.normalizer.normalize(raw)
        except ConvocatoriasError as e:
            logger.warning(f"Entrada rechazada ({e.code}): {e.message}")
            return ParseOutcome(
                success=False,
                errors=[e.message],
                message="No se pudo procesar el contenido",
                error_code=e.code,
            )

        logger.info(
            f"Analizando contenido de {raw.source_kind} "
            f"({payload.content_length:,} caracteres{', recortado' if payload.truncated else ''})"
        )

        try:
            llm_text = self.gateway.complete(
                payload.system_prompt,
                payload.user_prompt,
                temperature=self.task_config["temperature"],
                max_tokens=self.task_config["max_tokens"],
                title=self.task_config.get("title"),
            )
        except LLMEmptyResponseError as e:
            # El proveedor respondió, pero sin texto que interpretar
            logger.error(f"❌ Respuesta del LLM sin contenido utilizable: {e}")
            return ParseOutcome(
                success=False,
                errors=[f"La IA no entregó una respuesta interpretable: {e}"],
                message="Error al procesar el contenido",
                truncated=payload.truncated,
                error_code=LLMOutputUnparsableError.code,
            )
        except LLMGatewayError as e:
            logger.error(f"❌ Falló la llamada al LLM: {e}")
            return ParseOutcome(
                success=False,
                errors=[f"Error en la llamada a la IA: {e}"],
                message="Error al procesar el contenido",
                truncated=payload.truncated,
                error_code=LLMCallFailedError.code,
            )

        extraction = self.extractor.extract(llm_text, context=raw.content)
        return self._build_outcome(extraction, payload.truncated)

    def _resolve_url(self, raw: RawInput) -> RawInput:
        """Descarga el texto si el origen es una URL y el contenido es la dirección"""
        content = (raw.content or "").strip()
        if raw.source_kind != "url" or not content.lower().startswith(("http://", "https://")):
            return raw
        if len(content.split()) > 1:
            # Texto ya copiado desde la página
            return raw
        text = self.url_fetcher.fetch_text(content)
        return raw.model_copy(update={"content": text, "mime_hint": raw.mime_hint or "html"})

    def _build_outcome(self, extraction: ExtractionResult, truncated: bool) -> ParseOutcome:
        warnings: List[str] = []
        if truncated:
            warnings.append(
                f"El contenido superó los {self.normalizer.max_chars:,} caracteres y se analizó solo el inicio"
            )

        if extraction.is_degraded:
            warnings.append(f"No se pudo interpretar la respuesta de la IA: {extraction.reason}")
            return ParseOutcome(
                success=True,
                convocatorias=extraction.candidates,
                confidence=extraction.confidence,
                warnings=warnings,
                message="Se generó un registro provisional de baja confianza",
                truncated=truncated,
                degraded=True,
            )

        valid, filter_warnings = filter_candidates(extraction.candidates)
        warnings.extend(filter_warnings)

        if not valid:
            logger.info(f"Sin convocatorias válidas ({len(extraction.candidates)} candidatas descartadas)")
            return ParseOutcome(
                success=False,
                confidence=extraction.confidence,
                warnings=warnings,
                errors=[NO_VALID_CANDIDATES_ERROR],
                message="El contenido no contiene convocatorias detectables",
                truncated=truncated,
            )

        logger.info(f"✅ {len(valid)} convocatorias válidas (confianza {extraction.confidence}%)")
        return ParseOutcome(
            success=True,
            convocatorias=valid,
            confidence=extraction.confidence,
            warnings=warnings,
            truncated=truncated,
        )


def filter_candidates(candidates: List[Convocatoria]) -> Tuple[List[Convocatoria], List[str]]:
    """
    Separa las candidatas válidas de las incompletas.

    Returns:
        Tupla (válidas, advertencias por cada candidata descartada)
    """
    valid = []
    warnings = []
    for candidate in candidates:
        name = (candidate.nombre_concurso or "").strip()
        if not name or not (candidate.institucion or "").strip() or not candidate.fecha_cierre:
            warnings.append(f"Convocatoria incompleta ignorada: {name or 'Sin nombre'}")
            continue
        if not ISO_DATE_PATTERN.match(candidate.fecha_cierre.strip()):
            warnings.append(f"Fecha inválida en: {name}")
            continue
        valid.append(candidate)
    return valid, warnings
