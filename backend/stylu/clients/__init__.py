from .postgrest import Query, SupabaseClient

__all__ = ["Query", "SupabaseClient"]
