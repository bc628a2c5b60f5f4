"""
Interfaz común de los gateways LLM

Cada gateway hace UNA llamada síncrona por invocación: sin reintentos ni
rotación de keys. Los clientes se construyen explícitamente y se inyectan en
los servicios, de modo que los tests puedan sustituirlos por stubs.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

import requests

from config import LLM_CONFIG
from llm.errors import LLMGatewayError

logger = logging.getLogger(__name__)


class LLMGateway(ABC):
    """Gateway hacia una API de completions que responde texto libre"""

    provider = "base"

    def __init__(
        self,
        api_key: str,
        model_name: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            api_key: API key del proveedor
            model_name: Modelo a usar (opcional, usa el del proveedor por defecto)
            config: Configuración adicional (api_timeout, app_url)
            session: Sesión de requests (opcional, útil para tests)
        """
        if not api_key:
            raise ValueError(f"Se requiere api_key para el proveedor {self.provider}")
        self.api_key = api_key
        self.config = config or {}
        self.model_name = model_name or self.default_model()
        self.timeout = self.config.get("api_timeout", LLM_CONFIG["api_timeout"])
        self.session = session or requests.Session()

    @abstractmethod
    def default_model(self) -> str:
        """Modelo por defecto del proveedor"""

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 4000,
        title: Optional[str] = None,
    ) -> str:
        """
        Envía el prompt y retorna el texto de la respuesta.

        Raises:
            LLMGatewayError: si la llamada falla o el proveedor responde no 2xx
        """

    def _post(self, url: str, **kwargs) -> Dict[str, Any]:
        """
        POST con manejo uniforme de errores de red y HTTP.

        Returns:
            Cuerpo JSON de la respuesta
        """
        try:
            response = self.session.post(url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.error(f"⏱️ Timeout después de {self.timeout}s en llamada a {self.provider}")
            raise LLMGatewayError(
                f"Timeout de {self.timeout}s excedido en llamada a {self.provider}",
                provider=self.provider,
            ) from e
        except requests.ConnectionError as e:
            logger.error(f"🔌 Error de conexión con {self.provider}: {e}")
            raise LLMGatewayError(f"Error de conexión con {self.provider}", provider=self.provider) from e
        except requests.RequestException as e:
            logger.error(f"📡 Error en request a {self.provider}: {e}")
            raise LLMGatewayError(f"Error en request a {self.provider}: {e}", provider=self.provider) from e

        if response.status_code < 200 or response.status_code >= 300:
            response_text = (response.text or "")[:1000]
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            error_info = error_data.get("error", {}) if isinstance(error_data, dict) else {}
            if not isinstance(error_info, dict):
                error_info = {"message": str(error_info)}
            error_msg = error_info.get("message", f"HTTP {response.status_code}")

            logger.error(f"❌ Error HTTP {response.status_code} en llamada a {self.provider}: {error_msg}")
            logger.debug(f"   Response body (primeros 500 chars): {response_text[:500]}")
            raise LLMGatewayError(
                f"Error en {self.provider} (HTTP {response.status_code}): {error_msg}",
                provider=self.provider,
                status_code=response.status_code,
                error_code=str(error_info.get("code", response.status_code)),
                response_body=response_text,
            )

        try:
            body = response.json()
        except (ValueError, json.JSONDecodeError) as e:
            raise LLMGatewayError(
                f"Respuesta de {self.provider} no es JSON",
                provider=self.provider,
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            logger.error(f"❌ Respuesta de {self.provider} con formato inesperado: {type(body).__name__}")
            raise LLMGatewayError(
                f"Respuesta de {self.provider} no es un objeto JSON",
                provider=self.provider,
                status_code=response.status_code,
            )
        return body
