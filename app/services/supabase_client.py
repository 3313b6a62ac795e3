"""Supabase client singleton.

Backs the opportunity store queries in ``app.services.opportunity_service``
and access-token verification in ``app.api.deps.get_current_user_id``.
"""

from __future__ import annotations

import logging

from supabase import Client, create_client

from app.config import settings

logger = logging.getLogger(__name__)

_client: Client | None = None


def get_supabase() -> Client:
    """Return a shared Supabase client instance (lazy-init)."""
    global _client
    if _client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
            raise RuntimeError(
                "SUPABASE_URL and SUPABASE_KEY must be set in .env "
                "to query investment opportunities"
            )
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info("Supabase client initialized for %s", settings.SUPABASE_URL)
    return _client


def reset_supabase() -> None:
    """Drop the cached client so the next call re-reads settings."""
    global _client
    _client = None


def is_configured() -> bool:
    return bool(settings.SUPABASE_URL and settings.SUPABASE_KEY)
