"""
Adaptadores de almacenamiento
"""

from .supabase_client import SupabaseClient

__all__ = ["SupabaseClient"]
