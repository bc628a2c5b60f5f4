"""
Cliente para la API de chat completions de OpenRouter
"""

import logging
from typing import Optional

from config import AVAILABLE_PROVIDERS, LLM_CONFIG
from llm.base import LLMGateway
from llm.errors import LLMEmptyResponseError

logger = logging.getLogger(__name__)


class OpenRouterGateway(LLMGateway):
    """Gateway hacia OpenRouter (formato compatible con OpenAI)"""

    provider = "openrouter"

    def default_model(self) -> str:
        return AVAILABLE_PROVIDERS["openrouter"]["default_model"]

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 4000,
        title: Optional[str] = None,
    ) -> str:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.config.get("app_url", LLM_CONFIG["app_url"]),
            "X-Title": title or "ConvocatoriasPro",
        }
        payload = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        logger.info(f"Enviando prompt a OpenRouter ({self.model_name}, {len(user_prompt)} caracteres)")
        result = self._post(AVAILABLE_PROVIDERS["openrouter"]["endpoint"], json=payload, headers=headers)

        choices = result.get("choices")
        content = None
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")
            if isinstance(message, dict):
                content = message.get("content")
        if not isinstance(content, str) or not content:
            raise LLMEmptyResponseError("No se recibió respuesta de la IA", provider=self.provider)
        return content
