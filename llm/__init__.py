"""
Módulo de integración con proveedores LLM (OpenRouter, Gemini)

Los gateways hacen una sola llamada REST por invocación; la interpretación
de la respuesta está en llm.extractors.
"""

from typing import Optional, Dict, Any

from .base import LLMGateway
from .errors import LLMGatewayError, LLMEmptyResponseError
from .gemini_client import GeminiGateway
from .openrouter_client import OpenRouterGateway
from .prompts import (
    get_parse_system_prompt,
    get_parse_user_prompt,
    get_validation_user_prompt,
    get_enrichment_user_prompt,
)

GATEWAYS = {
    "openrouter": OpenRouterGateway,
    "gemini": GeminiGateway,
}


def create_gateway(
    provider: str,
    api_key: str,
    model_name: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
) -> LLMGateway:
    """
    Construye el gateway del proveedor indicado.

    Raises:
        ValueError: si el proveedor no existe o falta la api_key
    """
    gateway_cls = GATEWAYS.get((provider or "").lower())
    if gateway_cls is None:
        raise ValueError(f"Proveedor LLM desconocido: {provider}")
    return gateway_cls(api_key=api_key, model_name=model_name, config=config)


__all__ = [
    "LLMGateway",
    "LLMGatewayError",
    "LLMEmptyResponseError",
    "GeminiGateway",
    "OpenRouterGateway",
    "create_gateway",
    "get_parse_system_prompt",
    "get_parse_user_prompt",
    "get_validation_user_prompt",
    "get_enrichment_user_prompt",
]
