"""
Vista previa enriquecida de convocatorias (plan Pro)

Pide al LLM una descripción, cronograma y evaluación de riesgo. Si la
llamada falla o la respuesta es ilegible, arma una vista previa mínima
con los propios campos de la convocatoria.
"""

import logging
from typing import Optional, Dict, Any, List

from pydantic import ValidationError

from config import LLM_CONFIG, has_feature
from llm import LLMGateway, LLMGatewayError
from llm.extractors import load_json_payload
from llm.prompts import ENRICHMENT_SYSTEM_PROMPT, get_enrichment_user_prompt
from models import Convocatoria, EnrichmentResult, TimelineEvent, RiskAssessment
from utils.date_parser import to_date
from utils.errors import InvalidRequestError, UpgradeRequiredError

logger = logging.getLogger(__name__)

DEADLINE_EVENT = "Fecha límite de postulación"
OPENING_EVENT = "Apertura de convocatoria"
RESULTS_EVENT = "Publicación de resultados"


class EnrichmentService:
    """Genera la vista previa enriquecida de una convocatoria"""

    def __init__(self, gateway: Optional[LLMGateway] = None):
        self.gateway = gateway
        self.task_config = LLM_CONFIG["tasks"]["enrich"]

    def enrich(self, candidate: Convocatoria, plan_id: Optional[str]) -> EnrichmentResult:
        """
        Args:
            candidate: Convocatoria a enriquecer
            plan_id: Plan del usuario que solicita la vista previa

        Returns:
            EnrichmentResult (fallback=True si se construyó localmente)

        Raises:
            UpgradeRequiredError: el plan no incluye funcionalidades de IA
            InvalidRequestError: la convocatoria no tiene nombre
        """
        # El plan se verifica antes de cualquier llamada externa
        if not has_feature(plan_id, "ai_features"):
            raise UpgradeRequiredError()

        if not (candidate.nombre_concurso or "").strip():
            raise InvalidRequestError("No se proporcionó información de la convocatoria")

        result = self._ask_llm(candidate)
        if result is None:
            result = build_fallback_preview(candidate)

        if not result.enhanced_description.strip():
            result.enhanced_description = f"{candidate.nombre_concurso} - {candidate.institucion or ''}".strip(" -")

        result.timeline = complete_timeline(result.timeline, candidate)
        return result

    def _ask_llm(self, candidate: Convocatoria) -> Optional[EnrichmentResult]:
        if self.gateway is None:
            return None
        try:
            llm_text = self.gateway.complete(
                ENRICHMENT_SYSTEM_PROMPT,
                get_enrichment_user_prompt(candidate.model_dump(exclude_none=True)),
                temperature=self.task_config["temperature"],
                max_tokens=self.task_config["max_tokens"],
                title=self.task_config.get("title"),
            )
        except LLMGatewayError as e:
            logger.warning(f"Vista previa con IA no disponible, se usa la local: {e}")
            return None

        data, reason = load_json_payload(llm_text)
        if not isinstance(data, dict):
            logger.warning(f"Respuesta de vista previa ilegible: {reason or type(data).__name__}")
            return None

        data["timeline"] = _clean_timeline_items(data.get("timeline"))
        if not isinstance(data.get("risk_assessment"), dict):
            data.pop("risk_assessment", None)
        data["fallback"] = False
        try:
            return EnrichmentResult.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Vista previa con formato inesperado: {e}")
            return None


def _clean_timeline_items(items: Any) -> List[Dict[str, Any]]:
    """Descarta eventos sin fecha o sin descripción"""
    if not isinstance(items, list):
        return []
    cleaned = []
    for item in items:
        if isinstance(item, dict) and item.get("date") and item.get("event"):
            cleaned.append({
                "date": str(item["date"]).strip(),
                "event": str(item["event"]),
                "importance": item.get("importance"),
            })
    return cleaned


def build_fallback_preview(candidate: Convocatoria) -> EnrichmentResult:
    """Vista previa determinística construida solo con los campos de la convocatoria"""
    key_points = [
        f"Institución: {candidate.institucion or 'No especificada'}",
        f"Fecha límite: {candidate.fecha_cierre or 'No especificada'}",
        f"Financiamiento: {candidate.monto_financiamiento}" if candidate.monto_financiamiento else "Monto no especificado",
    ]
    return EnrichmentResult(
        enhanced_description=candidate.descripcion
        or f"Convocatoria de {candidate.institucion or 'institución no especificada'} - {candidate.nombre_concurso}",
        key_points=key_points,
        requirements_summary=[candidate.requisitos] if candidate.requisitos else ["Revisar bases de la convocatoria"],
        estimated_competition="medium",
        target_audience=["Emprendedores", "PyMES", "Startups"],
        success_tips=["Preparar documentación completa", "Revisar criterios de evaluación"],
        similar_opportunities=["Buscar en CORFO", "Revisar SERCOTEC"],
        risk_assessment=RiskAssessment(level="medium", factors=["Competencia esperada", "Requisitos técnicos"]),
        fallback=True,
    )


def complete_timeline(timeline: List[TimelineEvent], candidate: Convocatoria) -> List[TimelineEvent]:
    """
    Agrega las fechas conocidas de la convocatoria que falten, elimina
    fechas repetidas y ordena cronológicamente.
    """
    events = list(timeline)
    known_dates = {event.date for event in events}

    forced = [
        (candidate.fecha_cierre, DEADLINE_EVENT, "high"),
        (candidate.fecha_apertura, OPENING_EVENT, "medium"),
        (candidate.fecha_resultados, RESULTS_EVENT, "high"),
    ]
    for fecha, event, importance in forced:
        if fecha and fecha not in known_dates:
            events.append(TimelineEvent(date=fecha, event=event, importance=importance))
            known_dates.add(fecha)

    seen = set()
    unique = []
    for event in events:
        if event.date in seen:
            continue
        seen.add(event.date)
        unique.append(event)

    # Fechas no interpretables quedan al final, en su orden original
    def sort_key(event: TimelineEvent):
        parsed = to_date(event.date)
        return (parsed is None, parsed.isoformat() if parsed else "")

    return sorted(unique, key=sort_key)
