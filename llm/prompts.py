"""
Prompts y templates para el parsing, la validación y el enriquecimiento de
convocatorias
"""

import json
from typing import Dict, Any, Optional

PARSE_SYSTEM_PROMPT = """Eres un experto en análisis de convocatorias de financiamiento en Chile. Tu tarea es extraer información estructurada sobre convocatorias desde texto no estructurado.

Campos requeridos (obligatorios):
- nombre_concurso: Nombre oficial del concurso/convocatoria
- institucion: Organización que convoca (CORFO, SERCOTEC, ANID, etc.)
- fecha_cierre: Fecha límite en formato YYYY-MM-DD

Campos opcionales:
- fecha_apertura: Fecha de inicio en formato YYYY-MM-DD
- fecha_resultados: Fecha de resultados en formato YYYY-MM-DD
- monto_financiamiento: Monto en pesos chilenos
- requisitos: Requisitos principales
- estado: abierto/cerrado/en_evaluacion/finalizado
- descripcion: Resumen de la convocatoria
- contacto: Email o teléfono de contacto
- sitio_web: URL oficial
- area: Área temática (tecnología, innovación, etc.)
- tipo_fondo: Tipo de financiamiento
- fuente: Origen de la información

Responde SOLO con JSON válido en este formato:
{
  "convocatorias": [
    {
      "nombre_concurso": "string",
      "institucion": "string",
      "fecha_cierre": "YYYY-MM-DD"
    }
  ],
  "confidence": 0.85
}

Si NO encuentras ninguna convocatoria, retorna: {"convocatorias": [], "confidence": 0}"""

PARSE_USER_PROMPT_TEMPLATE = """Analiza el siguiente contenido de {source} ({file_type}) y extrae todas las convocatorias de financiamiento que encuentres:

{content}"""

VALIDATION_SYSTEM_PROMPT = """Eres un experto validador de convocatorias de financiamiento en Chile. Analiza la siguiente convocatoria y proporciona:
1. Evaluación de la calidad de los datos
2. Sugerencias de mejora
3. Detección de inconsistencias
4. Recomendaciones de campos faltantes

Responde SOLO con JSON válido en este formato:
{
  "data_quality": 0.85,
  "warnings": ["advertencias sobre los datos"],
  "suggestions": ["sugerencias generales"],
  "improvements": [
    {
      "field": "campo_a_mejorar",
      "suggested_value": "valor_sugerido",
      "reason": "razón_de_la_mejora"
    }
  ]
}"""

ENRICHMENT_SYSTEM_PROMPT = """Eres un consultor experto en convocatorias de financiamiento en Chile. Tu tarea es analizar una convocatoria y generar una vista previa enriquecida que ayude a los usuarios a entender mejor la oportunidad.

Proporciona:
1. Descripción mejorada y atractiva
2. Puntos clave destacados
3. Cronograma de eventos importantes
4. Resumen de requisitos
5. Estimación de competencia
6. Público objetivo
7. Consejos para el éxito
8. Oportunidades similares
9. Evaluación de riesgos

Responde SOLO con JSON válido en este formato:
{
  "enhanced_description": "Descripción atractiva y profesional",
  "key_points": ["punto 1", "punto 2"],
  "timeline": [
    {
      "date": "YYYY-MM-DD",
      "event": "descripción del evento",
      "importance": "high/medium/low"
    }
  ],
  "requirements_summary": ["requisito 1", "requisito 2"],
  "estimated_competition": "low/medium/high",
  "target_audience": ["audiencia 1", "audiencia 2"],
  "success_tips": ["consejo 1", "consejo 2"],
  "similar_opportunities": ["oportunidad 1", "oportunidad 2"],
  "risk_assessment": {
    "level": "low/medium/high",
    "factors": ["factor 1", "factor 2"]
  }
}"""

SOURCE_LABELS = {
    "file": "archivo",
    "clipboard": "texto pegado",
    "url": "página web",
}


def get_parse_system_prompt() -> str:
    """Retorna el prompt del sistema para el parsing"""
    return PARSE_SYSTEM_PROMPT


def get_parse_user_prompt(content: str, source: str, file_type: Optional[str] = None) -> str:
    """
    Genera el prompt de extracción para un contenido ya acotado.

    Args:
        content: Contenido limpio y recortado
        source: Origen del contenido (file, clipboard, url)
        file_type: Tipo de archivo informado por el cliente

    Returns:
        Prompt completo para la extracción
    """
    return PARSE_USER_PROMPT_TEMPLATE.format(
        source=SOURCE_LABELS.get(source, source),
        file_type=file_type or "text",
        content=content,
    )


def get_validation_user_prompt(convocatoria: Dict[str, Any]) -> str:
    return f"Valida esta convocatoria chilena:\n\n{json.dumps(convocatoria, ensure_ascii=False, indent=2)}"


def get_enrichment_user_prompt(convocatoria: Dict[str, Any]) -> str:
    return (
        "Analiza esta convocatoria chilena y genera una vista previa enriquecida:\n\n"
        f"{json.dumps(convocatoria, ensure_ascii=False, indent=2)}"
    )
