"""
Autenticación por bearer token contra el adaptador de almacenamiento
"""

import logging
from typing import Optional

from fastapi import Header, Request

from api.schemas import CurrentUser
from config import has_feature
from utils.errors import AuthenticationError, UpgradeRequiredError

logger = logging.getLogger(__name__)


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationError("Token de autenticación requerido")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Token de autenticación requerido")
    return token.strip()


def require_user(request: Request, authorization: Optional[str] = Header(default=None)) -> CurrentUser:
    """Valida el token y carga el plan del usuario antes de hacer cualquier trabajo"""
    token = _bearer_token(authorization)
    persistence = request.app.state.services.persistence
    user = persistence.get_user(token)
    plan = persistence.get_profile_plan(user["id"])
    return CurrentUser(id=user["id"], email=user.get("email"), plan=plan)


def require_ai_plan(user: CurrentUser) -> CurrentUser:
    """Rechaza a usuarios cuyo plan no incluye funcionalidades de IA"""
    if not has_feature(user.plan, "ai_features"):
        logger.info(f"Usuario {user.id} con plan {user.plan} sin acceso a IA")
        raise UpgradeRequiredError()
    return user
