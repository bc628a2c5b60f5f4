"""
Errores de dominio de ConvocatoriasPro

Cada error lleva un código legible por máquina y el status HTTP con el que
la API lo informa.
"""

from typing import Optional, Dict, Any


class ConvocatoriasError(Exception):
    """Error base con código y status HTTP"""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


class EmptyContentError(ConvocatoriasError):
    code = "EMPTY_CONTENT"
    status_code = 400


class InvalidRequestError(ConvocatoriasError):
    code = "INVALID_REQUEST"
    status_code = 400


class AuthenticationError(ConvocatoriasError):
    code = "UNAUTHORIZED"
    status_code = 401


class UpgradeRequiredError(ConvocatoriasError):
    """El plan del usuario no habilita la funcionalidad solicitada"""

    code = "UPGRADE_REQUIRED"
    status_code = 403

    def __init__(self, message: str = "Esta funcionalidad requiere plan Pro"):
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["upgrade_required"] = True
        return data


class LLMCallFailedError(ConvocatoriasError):
    code = "LLM_CALL_FAILED"
    status_code = 500


class LLMOutputUnparsableError(ConvocatoriasError):
    code = "LLM_OUTPUT_UNPARSABLE"
    status_code = 500


class PersistenceError(ConvocatoriasError):
    code = "PERSISTENCE_ERROR"
    status_code = 500


class NotFoundError(ConvocatoriasError):
    code = "NOT_FOUND"
    status_code = 404


def status_for_code(code: str) -> int:
    """Status HTTP asociado a un código de error (500 si no se conoce)"""
    for error_cls in (
        EmptyContentError,
        InvalidRequestError,
        AuthenticationError,
        UpgradeRequiredError,
        LLMCallFailedError,
        LLMOutputUnparsableError,
        PersistenceError,
        NotFoundError,
    ):
        if error_cls.code == code:
            return error_cls.status_code
    return ConvocatoriasError.status_code
