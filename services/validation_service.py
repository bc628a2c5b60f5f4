"""
Validador de campos de convocatorias

Puntaje local basado en reglas y, si los campos obligatorios están bien,
una segunda opinión opcional del LLM que se promedia con el puntaje local.
"""

import json
import logging
from datetime import date
from typing import Optional, Dict, Any, List, Tuple

from pydantic import ValidationError

from config import LLM_CONFIG, VALIDATION_CONFIG
from llm import LLMGateway, LLMGatewayError
from llm.extractors import load_json_payload
from llm.prompts import VALIDATION_SYSTEM_PROMPT, get_validation_user_prompt
from models import Convocatoria, ValidationOutcome, AIValidation
from utils.date_parser import is_iso_date, is_past_date

logger = logging.getLogger(__name__)

FIX_REQUIRED_SUGGESTION = "Corrige los errores obligatorios antes de continuar"
AI_UNAVAILABLE_WARNING = "No se pudo completar la validación avanzada con IA; se usa el puntaje local"


class ValidationService:
    """Valida una convocatoria candidata y le asigna un puntaje 0..100"""

    def __init__(
        self,
        gateway: Optional[LLMGateway] = None,
        config: Optional[Dict[str, Any]] = None,
        today: Optional[date] = None,
    ):
        """
        Args:
            gateway: Gateway LLM para la validación avanzada (None = solo reglas locales)
            config: Configuración de puntajes (default: VALIDATION_CONFIG)
            today: Fecha de referencia para detectar cierres pasados (default: hoy)
        """
        self.gateway = gateway
        self.config = config or VALIDATION_CONFIG
        self.today = today
        self.task_config = LLM_CONFIG["tasks"]["validate"]

    def validate_local(self, candidate: Convocatoria) -> Tuple[int, List[str], List[str]]:
        """
        Puntaje por reglas, sin IA.

        Returns:
            Tupla (score, errors, warnings)
        """
        cfg = self.config
        errors: List[str] = []
        warnings: List[str] = []
        score = 0

        nombre = (candidate.nombre_concurso or "").strip()
        if len(nombre) < cfg["min_name_length"]:
            errors.append(f"Nombre del concurso es obligatorio (mínimo {cfg['min_name_length']} caracteres)")
        else:
            score += cfg["required_points"]

        institucion = (candidate.institucion or "").strip()
        if len(institucion) < cfg["min_organization_length"]:
            errors.append(f"Institución es obligatoria (mínimo {cfg['min_organization_length']} caracteres)")
        else:
            score += cfg["required_points"]

        fecha_cierre = (candidate.fecha_cierre or "").strip()
        if not fecha_cierre:
            errors.append("Fecha de cierre es obligatoria")
        elif not is_iso_date(fecha_cierre):
            errors.append("Fecha de cierre debe estar en formato YYYY-MM-DD")
        else:
            if is_past_date(fecha_cierre, today=self.today):
                warnings.append("La fecha de cierre parece estar en el pasado")
            score += cfg["required_points"]

        min_text = cfg["min_long_text_length"]
        optional_present = [
            len(candidate.descripcion or "") > min_text,
            bool(candidate.monto_financiamiento),
            len(candidate.requisitos or "") > min_text,
            bool(candidate.contacto),
            bool(candidate.sitio_web),
            bool(candidate.area),
        ]
        score += cfg["optional_points"] * sum(optional_present)

        return min(score, 100), errors, warnings

    def validate(self, candidate: Convocatoria) -> ValidationOutcome:
        """
        Valida la convocatoria.

        Con errores obligatorios el resultado es inválido, el puntaje queda
        acotado y no se consulta al LLM.
        """
        score, errors, warnings = self.validate_local(candidate)

        if errors:
            logger.info(f"Convocatoria con {len(errors)} errores obligatorios (score local {score})")
            return ValidationOutcome(
                is_valid=False,
                score=min(score, self.config["invalid_score_cap"]),
                errors=errors,
                warnings=warnings,
                suggestions=[FIX_REQUIRED_SUGGESTION],
            )

        if self.gateway is None:
            return ValidationOutcome(is_valid=True, score=score, warnings=warnings)

        ai_validation = self._ai_validation(candidate)
        if ai_validation is None:
            return ValidationOutcome(
                is_valid=True,
                score=score,
                warnings=warnings + [AI_UNAVAILABLE_WARNING],
            )

        final_score = min(round((score + ai_validation.data_quality * 100) / 2), 100)
        is_valid = final_score >= self.config["ai_valid_threshold"]
        logger.info(f"Score local {score}, calidad IA {ai_validation.data_quality:.2f}, final {final_score}")

        return ValidationOutcome(
            is_valid=is_valid,
            score=final_score,
            errors=errors,
            warnings=warnings + ai_validation.warnings,
            suggestions=ai_validation.suggestions,
            improvements=ai_validation.improvements,
        )

    def _ai_validation(self, candidate: Convocatoria) -> Optional[AIValidation]:
        """Consulta al LLM; None si la llamada falla o la respuesta no se puede interpretar"""
        try:
            llm_text = self.gateway.complete(
                VALIDATION_SYSTEM_PROMPT,
                get_validation_user_prompt(candidate.model_dump(exclude_none=True)),
                temperature=self.task_config["temperature"],
                max_tokens=self.task_config["max_tokens"],
                title=self.task_config.get("title"),
            )
        except LLMGatewayError as e:
            logger.warning(f"Validación avanzada no disponible: {e}")
            return None

        data, reason = load_json_payload(llm_text)
        if not isinstance(data, dict):
            logger.warning(f"Respuesta de validación ilegible: {reason or type(data).__name__}")
            return None
        data.setdefault("data_quality", self.config["ai_default_quality"])
        try:
            return AIValidation.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Respuesta de validación con formato inesperado: {e}")
            logger.debug(json.dumps(data, ensure_ascii=False)[:500])
            return None
