"""Supabase client singletons (anon + service-role)."""

from functools import lru_cache

import httpx
from supabase.lib.client_options import SyncClientOptions

from app.config import settings
from supabase import Client, create_client


def _client_options() -> SyncClientOptions:
    timeout_seconds = max(1, settings.supabase_postgrest_timeout_seconds)
    pool_size = max(10, settings.supabase_http_max_connections)
    keepalive = max(5, min(pool_size, settings.supabase_http_max_keepalive_connections))

    return SyncClientOptions(
        auto_refresh_token=False,
        persist_session=False,
        postgrest_client_timeout=timeout_seconds,
        httpx_client=httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            limits=httpx.Limits(
                max_connections=pool_size,
                max_keepalive_connections=keepalive,
            ),
        ),
    )


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Return the anon-key client used to verify caller tokens."""
    return create_client(
        settings.supabase_url, settings.supabase_anon_key, options=_client_options()
    )


@lru_cache(maxsize=1)
def get_service_client() -> Client:
    """Return the service-role client used by the election services.

    Organization scoping is enforced in the services, not by RLS.
    """
    return create_client(
        settings.supabase_url, settings.supabase_service_key, options=_client_options()
    )
