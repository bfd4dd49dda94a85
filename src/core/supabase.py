from __future__ import annotations

from threading import Lock
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from src.core.config import get_settings


class SupabaseClient:
    _shared_client: httpx.Client | None = None
    _client_lock: Lock = Lock()

    def __init__(self) -> None:
        settings = get_settings()
        self.project_url = settings.supabase_url.rstrip("/")
        self.base_url = self.project_url + "/rest/v1"
        self.auth_url = self.project_url + "/auth/v1"
        self.api_key = settings.supabase_service_role_key or settings.supabase_anon_key
        if not self.api_key:
            raise ValueError("Supabase API key is required")
        self._client = self._get_shared_client(settings.supabase_timeout_seconds)

    @classmethod
    def _get_shared_client(cls, timeout: float) -> httpx.Client:
        if cls._shared_client is not None:
            return cls._shared_client
        with cls._client_lock:
            if cls._shared_client is None:
                cls._shared_client = httpx.Client(
                    timeout=timeout,
                    limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
                )
        return cls._shared_client

    def select(
        self,
        table: str,
        select: str,
        filters: Optional[List[Tuple[str, str]]] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        count: bool = False,
    ) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        params: List[Tuple[str, str]] = [("select", select)]
        if filters:
            params.extend(filters)
        if limit is not None:
            params.append(("limit", str(limit)))
        if order:
            params.append(("order", order))

        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        if count:
            headers["Prefer"] = "count=exact"

        url = f"{self.base_url}/{table}?{urlencode(params, doseq=True)}"
        response = self._client.get(url, headers=headers)
        response.raise_for_status()
        total_count = None
        if count and "content-range" in response.headers:
            content_range = response.headers["content-range"]
            if "/" in content_range:
                total = content_range.split("/")[-1]
                if total.isdigit():
                    total_count = int(total)
        data = response.json()
        if not isinstance(data, list):
            return [], total_count
        return data, total_count

    def get_user(self, access_token: str) -> Optional[Dict[str, Any]]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token}",
        }
        response = self._client.get(f"{self.auth_url}/user", headers=headers)
        if response.status_code in (401, 403):
            return None
        response.raise_for_status()
        data = response.json()
        if isinstance(data, dict) and data.get("id"):
            return data
        return None
