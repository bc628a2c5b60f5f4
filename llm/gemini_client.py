"""
Cliente para interactuar con Gemini API

Las llamadas se hacen directamente vía REST (`generateContent`) pidiendo
respuesta en formato JSON.
"""

import logging
from typing import Optional, Dict, Any

from config import AVAILABLE_PROVIDERS
from llm.base import LLMGateway
from llm.errors import LLMEmptyResponseError

logger = logging.getLogger(__name__)


class GeminiGateway(LLMGateway):
    """Gateway hacia Gemini vía API REST"""

    provider = "gemini"

    def default_model(self) -> str:
        return AVAILABLE_PROVIDERS["gemini"]["default_model"]

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 4000,
        title: Optional[str] = None,
    ) -> str:
        url = AVAILABLE_PROVIDERS["gemini"]["endpoint"].format(model=self.model_name)
        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{
                "role": "user",
                "parts": [{"text": user_prompt}]
            }],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
                "responseMimeType": "application/json",
            }
        }
        headers = {"Content-Type": "application/json"}
        params = {"key": self.api_key}

        logger.info(f"Enviando prompt a Gemini ({self.model_name}, {len(user_prompt)} caracteres)")
        result = self._post(url, json=payload, headers=headers, params=params)
        return self._extract_text(result)

    def _extract_text(self, result: Dict[str, Any]) -> str:
        """
        Extrae el texto de la respuesta de Gemini.

        Raises:
            LLMEmptyResponseError: si la respuesta no trae texto
        """
        candidates = result.get("candidates") or []
        if not candidates:
            block_reason = result.get("promptFeedback", {}).get("blockReason", "UNKNOWN")
            raise LLMEmptyResponseError(
                f"Respuesta sin candidatos (blockReason: {block_reason})",
                provider=self.provider,
            )

        parts = candidates[0].get("content", {}).get("parts", [])
        if parts and parts[0].get("text"):
            finish_reason = candidates[0].get("finishReason", "UNKNOWN")
            if finish_reason == "MAX_TOKENS":
                # El extractor decide qué hacer con JSON incompleto
                logger.warning("⚠️ Respuesta truncada detectada (finishReason: MAX_TOKENS)")
            return parts[0]["text"]

        finish_reason = candidates[0].get("finishReason", "UNKNOWN")
        if finish_reason in ["SAFETY", "RECITATION", "OTHER"]:
            raise LLMEmptyResponseError(
                f"Respuesta bloqueada por {finish_reason}. El contenido puede violar políticas de seguridad.",
                provider=self.provider,
            )
        raise LLMEmptyResponseError(f"Respuesta sin contenido. finishReason: {finish_reason}", provider=self.provider)
