"""
Configuración específica por plan de suscripción.

Cada plan define sus límites y las funcionalidades que habilita.
"""

from typing import Dict, Any, Optional

FREE_PLAN = "free"
PRO_MONTHLY_PLAN = "pro_monthly"
PRO_ANNUAL_PLAN = "pro_annual"

# Límite de convocatorias del plan gratuito
FREE_PLAN_MAX_CONVOCATORIAS = 5

PLAN_CONFIGS: Dict[str, Dict[str, Any]] = {
    FREE_PLAN: {
        "display_name": "Gratis",
        "max_convocatorias": FREE_PLAN_MAX_CONVOCATORIAS,
        "duration_months": None,
        "features": {
            "ai_features": False,
            "export_features": False,
            "advanced_analytics": False,
        },
    },
    PRO_MONTHLY_PLAN: {
        "display_name": "Pro Mensual",
        "max_convocatorias": None,  # ilimitadas
        "duration_months": 1,
        "features": {
            "ai_features": True,
            "export_features": True,
            "advanced_analytics": True,
        },
    },
    PRO_ANNUAL_PLAN: {
        "display_name": "Pro Anual",
        "max_convocatorias": None,
        "duration_months": 12,
        "features": {
            "ai_features": True,
            "export_features": True,
            "advanced_analytics": True,
        },
    },
}


def get_plan_config(plan_id: Optional[str]) -> Dict[str, Any]:
    """
    Obtiene la configuración de un plan. Planes desconocidos o vacíos
    se tratan como el plan gratuito.
    """
    return PLAN_CONFIGS.get(plan_id or FREE_PLAN, PLAN_CONFIGS[FREE_PLAN])


def is_pro_plan(plan_id: Optional[str]) -> bool:
    """True si el plan habilita funcionalidades de IA"""
    if plan_id not in PLAN_CONFIGS:
        return False
    return PLAN_CONFIGS[plan_id]["features"]["ai_features"]


def has_feature(plan_id: Optional[str], feature: str) -> bool:
    """True si el plan habilita la funcionalidad indicada"""
    return bool(get_plan_config(plan_id)["features"].get(feature, False))
