"""``KioskBackend`` talking to the Flask API with ``requests``."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Sequence
from urllib.parse import urljoin

import requests

from .backend import KioskBackend
from .exceptions import AssetLoadFailure, NetworkFailure
from .state import PrecomputedResult

logger = logging.getLogger(__name__)


class HttpKioskBackend(KioskBackend):
    """
    Blocking ``requests`` calls are pushed to worker threads with
    ``asyncio.to_thread`` so the controller's event loop never stalls.
    Responses use the ``{"success": ..., "data": ..., "message": ...}`` envelope.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip('/') + '/'
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip('/'))

    def _request(self, operation: str, method: str, path: str, **kwargs) -> Any:
        url = self._url(path)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise NetworkFailure(operation, str(exc)) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if not response.ok or payload.get('success') is False:
            message = payload.get('message') or f'HTTP {response.status_code}'
            logger.warning("%s %s failed: %s", method, url, message)
            raise NetworkFailure(operation, message, status_code=response.status_code)
        return payload.get('data')

    # ── synchronous helpers ──────────────────────────────────────────

    def fetch_items(self) -> Dict[str, Any]:
        """Grid items and languages served by the kiosk server."""
        data = self._request('fetch_items', 'GET', '/api/items')
        if not isinstance(data, dict) or not isinstance(data.get('items'), list):
            raise NetworkFailure('fetch_items', 'malformed response')
        return data

    # ── KioskBackend ─────────────────────────────────────────────────

    async def submit_vote(self, keys: Sequence[str], language: str, submission_id: str) -> None:
        await asyncio.to_thread(
            self._request, 'submit_vote', 'POST', '/api/votes',
            json={'keys': list(keys), 'language': language, 'submission_id': submission_id},
        )

    async def precompute_result(self, keys: Sequence[str], language: str,
                                submission_id: str) -> PrecomputedResult:
        data = await asyncio.to_thread(
            self._request, 'precompute_result', 'POST', '/api/results/precompute',
            json={'keys': list(keys), 'language': language, 'submission_id': submission_id},
        )
        try:
            return PrecomputedResult(submission_id=data['submission_id'], assets=dict(data['assets']))
        except (KeyError, TypeError, ValueError) as exc:
            raise NetworkFailure('precompute_result', 'malformed response') from exc

    async def commit_result(self, submission_id: str) -> None:
        await asyncio.to_thread(
            self._request, 'commit_result', 'POST', '/api/results/commit',
            json={'submission_id': submission_id},
        )

    async def fetch_result_asset(self, result: PrecomputedResult, language: str) -> bytes:
        asset_url = result.asset_for(language)
        if not asset_url:
            raise AssetLoadFailure(language, 'no precomputed image for this language')
        return await asyncio.to_thread(self._download, self._url(asset_url), language)

    def _download(self, url: str, language: str) -> bytes:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise AssetLoadFailure(language, str(exc)) from exc
        if not response.ok:
            raise AssetLoadFailure(language, f'HTTP {response.status_code}')
        content_type = response.headers.get('Content-Type', '')
        if not content_type.startswith('image/') or not response.content:
            raise AssetLoadFailure(language, f'unexpected content type {content_type!r}')
        return response.content

    async def translate(self, language: str) -> Dict[str, str]:
        data = await asyncio.to_thread(
            self._request, 'translate', 'GET', f'/api/translations/{language}',
        )
        strings = data.get('strings') if isinstance(data, dict) else None
        if not isinstance(strings, dict):
            raise NetworkFailure('translate', 'malformed response')
        return {str(k): str(v) for k, v in strings.items()}
