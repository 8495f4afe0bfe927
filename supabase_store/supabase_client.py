from functools import lru_cache

from supabase import Client, create_client

from lib.config import require_supabase_settings


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Client for the Supabase project, built on first use."""
    supabase_url, supabase_key = require_supabase_settings()
    return create_client(supabase_url, supabase_key)


if __name__ == "__main__":
    print("Supabase client initialized.")
    try:
        response = get_supabase_client().table("workshops").select("id").limit(1).execute()
        print("✅ Reachable, sample:", response.data)
    except Exception as e:
        print("❌ Error:", e)
