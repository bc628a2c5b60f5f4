"""
Errores de las llamadas a proveedores LLM
"""

from typing import Optional


class LLMGatewayError(Exception):
    """
    La llamada al proveedor LLM falló (HTTP no 2xx, timeout o error de conexión).
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        response_body: Optional[str] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.error_code = error_code
        self.response_body = response_body


class LLMEmptyResponseError(LLMGatewayError):
    """El proveedor respondió 2xx pero sin texto utilizable"""
