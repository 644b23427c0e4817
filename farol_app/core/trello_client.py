"""Trello REST client wrapper (key/token auth + TTL response cache)."""

from __future__ import annotations

import hashlib
import json
import time
from collections.abc import Sequence
from typing import Any

import requests

from .config import (
    ACTION_FETCH_LIMIT,
    ACTION_FILTER,
    CACHE_TTL_SECONDS,
    CARD_FETCH_FIELDS,
    MEMBER_FETCH_FIELDS,
    REQUEST_TIMEOUT_SECONDS,
    TRELLO_API_BASE,
)


class TrelloAPIError(RuntimeError):
    """A board API request failed (transport error or HTTP status >= 400)."""


class TrelloAPI:
    def __init__(self, api_key: str, token: str, base_url: str = TRELLO_API_BASE):
        self.base_url = base_url.rstrip("/")
        self._auth = {"key": api_key, "token": token}
        self.session = requests.Session()
        # Simple in-memory cache: {(hash): (timestamp, data)}
        self._cache: dict[str, tuple[float, Any]] = {}
        self._cache_ttl = CACHE_TTL_SECONDS

    def clear_cache(self) -> None:
        """Reset the in-memory response cache."""
        cache = getattr(self, "_cache", None)
        if isinstance(cache, dict):
            cache.clear()

    def _cache_key(self, path: str, params: dict[str, Any]) -> str:
        payload = {"path": path, "params": params}
        return hashlib.sha256(json.dumps(payload, sort_keys=True).encode()).hexdigest()

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        params = dict(params or {})
        key = self._cache_key(path, params)
        now = time.time()
        cached = self._cache.get(key)
        if cached and (now - cached[0]) < self._cache_ttl:
            return cached[1]
        url = f"{self.base_url}/{path.lstrip('/')}"
        # Credentials stay out of error messages; only the path is reported.
        try:
            resp = self.session.get(url, params={**params, **self._auth}, timeout=REQUEST_TIMEOUT_SECONDS)
        except requests.RequestException as exc:
            raise TrelloAPIError(f"Request to {path} failed: {exc.__class__.__name__}") from exc
        if resp.status_code >= 400:
            raise TrelloAPIError(f"HTTP {resp.status_code} on {path}: {resp.text[:200]}")
        data = resp.json()
        self._cache[key] = (now, data)
        return data

    def board_lists(self, board_id: str) -> list[dict[str, Any]]:
        return self.get_json(f"boards/{board_id}/lists")

    def board_cards(self, board_id: str, fields: Sequence[str] = CARD_FETCH_FIELDS) -> list[dict[str, Any]]:
        return self.get_json(f"boards/{board_id}/cards", {"fields": ",".join(fields)})

    def board_members(self, board_id: str) -> list[dict[str, Any]]:
        return self.get_json(f"boards/{board_id}/members", {"fields": ",".join(MEMBER_FETCH_FIELDS)})

    def card_move_actions(self, card_id: str) -> list[dict[str, Any]]:
        return self.get_json(
            f"cards/{card_id}/actions",
            {"filter": ACTION_FILTER, "limit": ACTION_FETCH_LIMIT},
        )
