"""
Cliente REST del BaaS (Supabase): autenticación y tablas de la aplicación

Solo cubre lo que usan los servicios; no hay caché ni reintentos.
"""

import logging
from typing import Optional, Dict, Any, List

import requests

from config import FREE_PLAN, load_supabase_config
from models import StoredConvocatoria
from utils.errors import AuthenticationError, PersistenceError

logger = logging.getLogger(__name__)


class SupabaseClient:
    """
    Adaptador de almacenamiento y autenticación.

    Se construye explícitamente con la URL del proyecto y la service role
    key, y se inyecta en los servicios que lo necesitan.
    """

    def __init__(
        self,
        url: str,
        service_role_key: str,
        timeout: int = 15,
        session: Optional[requests.Session] = None,
    ):
        if not url or not service_role_key:
            raise ValueError("Se requieren SUPABASE_URL y SUPABASE_SERVICE_ROLE_KEY")
        self.url = url.rstrip("/")
        self.service_role_key = service_role_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls) -> "SupabaseClient":
        """Construye el cliente con la configuración de variables de entorno"""
        cfg = load_supabase_config()
        return cls(cfg["url"], cfg["service_role_key"], timeout=cfg["timeout"])

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Error de conexión con el almacenamiento ({method} {path}): {e}")
            raise PersistenceError(f"No se pudo contactar el almacenamiento: {e}") from e

        if not response.ok:
            logger.error(f"❌ {method} {path} respondió HTTP {response.status_code}: {response.text[:300]}")
            raise PersistenceError(f"Error del almacenamiento (HTTP {response.status_code})")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    # ---- Autenticación ----

    def get_user(self, token: str) -> Dict[str, Any]:
        """
        Valida un access token y retorna el usuario.

        Raises:
            AuthenticationError: token ausente, inválido o expirado
        """
        if not token:
            raise AuthenticationError("Token de autenticación requerido")
        try:
            response = self.session.get(
                f"{self.url}/auth/v1/user",
                headers={"apikey": self.service_role_key, "Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Error validando token: {e}")
            raise PersistenceError(f"No se pudo validar la sesión: {e}") from e

        if response.status_code in (401, 403):
            raise AuthenticationError("Usuario no autenticado")
        if not response.ok:
            raise PersistenceError(f"Error validando la sesión (HTTP {response.status_code})")

        user = response.json()
        if not user or not user.get("id"):
            raise AuthenticationError("Usuario no autenticado")
        return user

    # ---- Perfiles ----

    def get_profile_plan(self, user_id: str) -> str:
        """Plan del perfil del usuario (free si no tiene perfil)"""
        rows = self._request(
            "GET",
            "/rest/v1/profiles",
            params={"id": f"eq.{user_id}", "select": "plan"},
            headers=self._headers(),
        )
        if not rows:
            return FREE_PLAN
        return rows[0].get("plan") or FREE_PLAN

    def update_profile_plan(self, user_id: str, plan_id: str, expires_at: Optional[str]) -> Any:
        return self.update_rows(
            "profiles",
            {"id": user_id},
            {"plan": plan_id, "plan_expires_at": expires_at},
        )

    # ---- Convocatorias ----

    def list_convocatorias(self, user_id: str) -> List[StoredConvocatoria]:
        rows = self._request(
            "GET",
            "/rest/v1/convocatorias",
            params={"user_id": f"eq.{user_id}", "select": "*", "order": "created_at.desc"},
            headers=self._headers(),
        ) or []
        return [StoredConvocatoria.model_validate(row) for row in rows]

    def insert_convocatoria(self, row: Dict[str, Any]) -> Any:
        return self.insert_row("convocatorias", row)

    def update_convocatoria(self, convocatoria_id: str, user_id: str, data: Dict[str, Any]) -> Any:
        return self.update_rows("convocatorias", {"id": convocatoria_id, "user_id": user_id}, data)

    # ---- Genéricos ----

    def list_rows(self, table: str, match: Dict[str, Any]) -> List[Dict[str, Any]]:
        params = {column: f"eq.{value}" for column, value in match.items()}
        params["select"] = "*"
        return self._request("GET", f"/rest/v1/{table}", params=params, headers=self._headers()) or []

    def insert_row(self, table: str, row: Dict[str, Any]) -> Any:
        return self._request(
            "POST",
            f"/rest/v1/{table}",
            json=row,
            headers=self._headers({"Prefer": "return=representation"}),
        )

    def update_rows(self, table: str, match: Dict[str, Any], data: Dict[str, Any]) -> Any:
        params = {column: f"eq.{value}" for column, value in match.items()}
        return self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=params,
            json=data,
            headers=self._headers({"Prefer": "return=representation"}),
        )
