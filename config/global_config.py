"""
Configuración global del sistema (no específica de plan).

Los secretos (URL de Supabase, API keys de proveedores LLM) se leen desde el
entorno del proceso; el resto son constantes de módulo.
"""

import os
from typing import Dict, Any

# Proveedores LLM disponibles y sus modelos por defecto
AVAILABLE_PROVIDERS = {
    "openrouter": {
        "name": "OpenRouter",
        "endpoint": "https://openrouter.ai/api/v1/chat/completions",
        "default_model": "anthropic/claude-3.5-sonnet",
        "api_key_env": "OPENROUTER_API_KEY",
    },
    "gemini": {
        "name": "Google Gemini",
        "endpoint": "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
        "default_model": "gemini-2.5-flash-lite",
        "api_key_env": "GEMINI_API_KEY",
    },
}

# Modelos con información básica (para selección desde configuración)
AVAILABLE_MODELS = {
    "anthropic/claude-3.5-sonnet": {
        "provider": "openrouter",
        "name": "Claude 3.5 Sonnet (OpenRouter)",
        "recommended": True
    },
    "gemini-2.5-flash-lite": {
        "provider": "gemini",
        "name": "Gemini 2.5 Flash Lite",
        "recommended": True
    },
    "gemini-2.5-flash": {
        "provider": "gemini",
        "name": "Gemini 2.5 Flash",
        "recommended": False
    },
}

# Configuración de llamadas al LLM por tarea
LLM_CONFIG = {
    "provider": "openrouter",
    "app_url": "https://convocatoriaspro.com",
    "api_timeout": 60,  # segundos; una sola llamada, sin reintentos
    "tasks": {
        "parse": {"temperature": 0.1, "max_tokens": 4000, "title": "ConvocatoriasPro Parser Agent"},
        "validate": {"temperature": 0.1, "max_tokens": 2000, "title": "ConvocatoriasPro Validator Agent"},
        "enrich": {"temperature": 0.3, "max_tokens": 3000, "title": "ConvocatoriasPro Preview Agent"},
    },
}

# Configuración del pipeline de parsing
PARSER_CONFIG = {
    "max_content_chars": 8000,  # límite de contexto enviado al LLM
    "default_confidence": 50,  # cuando el LLM no informa confianza
    "fallback_confidence": 10,  # resultado sintético de baja confianza
    "fallback_name_max_chars": 120,
    "source_kinds": ("file", "clipboard", "url"),
    "url_fetch_timeout": 20,
}

# Reglas del validador de campos
VALIDATION_CONFIG = {
    "required_points": 25,
    "optional_points": 5,
    "min_name_length": 3,
    "min_organization_length": 2,
    "min_long_text_length": 10,  # descripcion y requisitos deben superar este largo
    "invalid_score_cap": 30,
    "ai_valid_threshold": 60,
    "ai_default_quality": 0.7,
}

# Agregación del dashboard
DASHBOARD_CONFIG = {
    "top_organizations": 10,
    "trailing_months": 6,
    "high_priority_days": 7,
    "medium_priority_days": 30,
    "recent_activity_size": 5,
    "upcoming_deadlines_size": 5,
}

# Calendario
CALENDAR_CONFIG = {
    "upcoming_months": 3,
}

# Alertas de vencimiento por correo
ALERTS_CONFIG = {
    "deadline_warning_days": 7,  # aviso una semana antes del cierre
    "deadline_urgent_days": 1,  # aviso urgente el día anterior
    "digest_weekday": 0,  # lunes
    "digest_interval_days": 7,
    "sent_retention_days": 30,  # alertas enviadas que se conservan antes de limpiar
    "alert_states": ("abierto",),  # solo convocatorias abiertas generan avisos
}

# Sincronización de operaciones pendientes
SYNC_CONFIG = {
    "applied_ids_limit": 10000,  # ids aplicados que se recuerdan por instancia
    "supported_operations": (
        "save_convocatoria",
        "update_convocatoria",
        "save_search",
        "track_analytics",
        "update_settings",
    ),
}


def load_supabase_config() -> Dict[str, Any]:
    """
    Lee la configuración del BaaS desde variables de entorno.

    Returns:
        Diccionario con url, service_role_key y timeout
    """
    return {
        "url": os.getenv("SUPABASE_URL", "").rstrip("/"),
        "service_role_key": os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
        "timeout": int(os.getenv("SUPABASE_TIMEOUT", "30")),
    }


def load_llm_credentials() -> Dict[str, Any]:
    """
    Lee el proveedor activo y su API key desde variables de entorno.

    Returns:
        Diccionario con provider, api_key y model
    """
    provider = os.getenv("LLM_PROVIDER", LLM_CONFIG["provider"]).lower()
    provider_info = AVAILABLE_PROVIDERS.get(provider, AVAILABLE_PROVIDERS[LLM_CONFIG["provider"]])
    return {
        "provider": provider if provider in AVAILABLE_PROVIDERS else LLM_CONFIG["provider"],
        "api_key": os.getenv(provider_info["api_key_env"], ""),
        "model": os.getenv("LLM_MODEL") or provider_info["default_model"],
    }
