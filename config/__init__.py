"""
Módulo de configuración centralizada.

Exporta configuraciones globales y por plan.
"""

from config.global_config import (
    AVAILABLE_PROVIDERS,
    AVAILABLE_MODELS,
    LLM_CONFIG,
    PARSER_CONFIG,
    VALIDATION_CONFIG,
    DASHBOARD_CONFIG,
    CALENDAR_CONFIG,
    ALERTS_CONFIG,
    SYNC_CONFIG,
    load_supabase_config,
    load_llm_credentials,
)

from config.plans import (
    FREE_PLAN,
    PRO_MONTHLY_PLAN,
    PRO_ANNUAL_PLAN,
    FREE_PLAN_MAX_CONVOCATORIAS,
    PLAN_CONFIGS,
    get_plan_config,
    is_pro_plan,
    has_feature,
)

__all__ = [
    # Global config
    "AVAILABLE_PROVIDERS",
    "AVAILABLE_MODELS",
    "LLM_CONFIG",
    "PARSER_CONFIG",
    "VALIDATION_CONFIG",
    "DASHBOARD_CONFIG",
    "CALENDAR_CONFIG",
    "ALERTS_CONFIG",
    "SYNC_CONFIG",
    "load_supabase_config",
    "load_llm_credentials",
    # Plans config
    "FREE_PLAN",
    "PRO_MONTHLY_PLAN",
    "PRO_ANNUAL_PLAN",
    "FREE_PLAN_MAX_CONVOCATORIAS",
    "PLAN_CONFIGS",
    "get_plan_config",
    "is_pro_plan",
    "has_feature",
]
