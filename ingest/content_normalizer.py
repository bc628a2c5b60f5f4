"""
Normalización del contenido crudo antes de enviarlo al LLM

Limpia el texto, lo recorta al límite de contexto y arma el par de prompts.
El recorte queda informado en PromptPayload.truncated.
"""

import logging
import re
from typing import Optional, Dict, Any

from config import PARSER_CONFIG
from llm.prompts import get_parse_system_prompt, get_parse_user_prompt
from models import RawInput, PromptPayload
from utils.errors import EmptyContentError

logger = logging.getLogger(__name__)


def clean_text_for_llm(text: str) -> str:
    """
    Limpia texto pegado o extraído de archivos para optimizar el procesamiento con LLM

    Elimina caracteres de control, separadores repetidos y espacios excesivos.

    Args:
        text: Texto a limpiar

    Returns:
        Texto limpio
    """
    if not text:
        return ""

    # Caracteres de control (excepto saltos de línea y tabs)
    text = re.sub(r'[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F-\x9F]', '', text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    # Imágenes markdown: mantener solo el alt text
    text = re.sub(r'!\[([^\]]*)\]\([^\)]+\)', r'\1', text)

    # "------" -> "---"
    text = re.sub(r'([\-_=*#])\1{3,}', r'\1\1\1', text)

    text = re.sub(r'\t+', ' ', text)
    text = re.sub(r' {2,}', ' ', text)

    lines = []
    empty_count = 0
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            empty_count += 1
            if empty_count <= 1:
                lines.append("")
            continue
        # Líneas que solo tienen separadores
        if re.match(r'^[\s\-_=*#\.]+$', stripped):
            continue
        empty_count = 0
        lines.append(stripped)

    return "\n".join(lines).strip()


class ContentNormalizer:
    """Convierte un RawInput en un PromptPayload acotado"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or PARSER_CONFIG
        self.max_chars = self.config.get("max_content_chars", 8000)

    def normalize(self, raw: RawInput) -> PromptPayload:
        """
        Args:
            raw: Entrada cruda (contenido ya resuelto si el origen era una URL)

        Returns:
            PromptPayload con truncated=True si el contenido superó el límite

        Raises:
            EmptyContentError: si no hay contenido útil
        """
        if raw.content is None or not raw.content.strip():
            raise EmptyContentError("No se proporcionó contenido para analizar")

        cleaned = clean_text_for_llm(raw.content)
        if not cleaned:
            raise EmptyContentError("El contenido no tiene texto analizable")

        original_length = len(cleaned)
        truncated = original_length > self.max_chars
        content = cleaned[: self.max_chars]
        if truncated:
            logger.warning(
                f"Contenido recortado de {original_length:,} a {self.max_chars:,} caracteres"
            )

        return PromptPayload(
            system_prompt=get_parse_system_prompt(),
            user_prompt=get_parse_user_prompt(content, raw.source_kind, raw.mime_hint),
            truncated=truncated,
            original_length=original_length,
            content_length=len(content),
        )


def normalize(raw: RawInput, config: Optional[Dict[str, Any]] = None) -> PromptPayload:
    """Atajo funcional de ContentNormalizer.normalize"""
    return ContentNormalizer(config).normalize(raw)
