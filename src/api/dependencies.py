from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

import httpx
from fastapi import Depends, Header

from src.core.config import get_settings
from src.core.errors import InsightsUnavailableError, UnauthorizedError
from src.core.supabase import SupabaseClient
from src.repositories.guide_insights_repository import GuideInsightsRepository
from src.services.guide_insights_service import GuideInsightsService

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> SupabaseClient:
    return SupabaseClient()


@lru_cache
def get_guide_insights_repository() -> GuideInsightsRepository:
    return GuideInsightsRepository(client=get_supabase_client())


def get_guide_insights_service() -> GuideInsightsService:
    return GuideInsightsService(
        repository=get_guide_insights_repository(),
        top_packages=get_settings().insights_top_packages,
    )


def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization:
        raise UnauthorizedError()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError()
    return token.strip()


def get_current_user_id(
    token: str = Depends(get_bearer_token),
    client: SupabaseClient = Depends(get_supabase_client),
) -> str:
    try:
        user = client.get_user(token)
    except httpx.HTTPError as exc:
        logger.exception("Failed to resolve user from access token")
        raise InsightsUnavailableError() from exc
    if not user:
        raise UnauthorizedError()
    return str(user["id"])
