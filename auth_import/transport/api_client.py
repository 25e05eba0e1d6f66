"""Async API client for the provider gateway, configured from the import config."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from ..errors import ProviderCallError, ProviderNotFoundError
from .authentication import ProviderAuthenticator

logger = logging.getLogger(__name__)


class ApiClient:
    def __init__(self, base_url: str, config_loader=None, api_token: str = "", client_id: str = "", client_secret: str = ""):
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.client_id = client_id
        self.client_secret = client_secret
        self.config_loader = config_loader

        rate_config = config_loader.get("async_config.rate_limiting", {}) if config_loader else {}
        self.rate_limit_per_minute = rate_config.get("rate_limit_per_minute", 50)
        self.burst_size = rate_config.get("burst_size", 10)
        self.retry_429_delay = rate_config.get("retry_429_delay", 10)
        self.backoff_multiplier = rate_config.get("backoff_multiplier", 1.5)
        self.max_retry_delay = rate_config.get("max_retry_delay", 300)
        self.max_retries = rate_config.get("max_retries", 3)

        concurrency_config = config_loader.get("async_config.concurrency", {}) if config_loader else {}
        self.max_concurrent_api_calls = concurrency_config.get("max_concurrent_api_calls", 5)

        perf_config = config_loader.get("async_config.performance", {}) if config_loader else {}
        self.connection_pool_size = perf_config.get("connection_pool_size", 20)
        self.connection_timeout = perf_config.get("connection_timeout", 10)
        self.read_timeout = perf_config.get("read_timeout", 30)
        self.keep_alive = perf_config.get("keep_alive", True)

        self.session: Optional[aiohttp.ClientSession] = None
        self.authenticator: Optional[ProviderAuthenticator] = None
        self.api_semaphore: Optional[asyncio.Semaphore] = None

        self.request_count = 0
        self.start_time = time.time()
        self.rate_limit_lock = asyncio.Lock()

    async def __aenter__(self):
        connector = aiohttp.TCPConnector(
            limit=self.connection_pool_size,
            ttl_dns_cache=300,
            use_dns_cache=True,
            keepalive_timeout=60 if self.keep_alive else 0,
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(total=None, connect=self.connection_timeout, sock_read=self.read_timeout)
        self.session = aiohttp.ClientSession(connector=connector, timeout=timeout)
        self.authenticator = ProviderAuthenticator(self.base_url, self.session)
        if self.api_token:
            self.authenticator.set_api_token(self.api_token)
        if self.client_id and self.client_secret:
            self.authenticator.set_oauth_credentials(self.client_id, self.client_secret)
        try:
            await self.authenticator.setup_authentication()
        except Exception:
            await self.session.close()
            raise
        self.api_semaphore = asyncio.Semaphore(self.max_concurrent_api_calls)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()

    async def check_rate_limit(self):
        async with self.rate_limit_lock:
            current_time = time.time()
            elapsed = current_time - self.start_time
            if elapsed >= 60:
                self.request_count = 0
                self.start_time = current_time
                elapsed = 0
            accumulated_requests = int((elapsed / 60) * self.rate_limit_per_minute)
            available_requests = self.burst_size + accumulated_requests
            if self.request_count >= available_requests:
                requests_per_second = self.rate_limit_per_minute / 60
                sleep_time = max(1.0 / requests_per_second, 0)
                if sleep_time > 0:
                    await asyncio.sleep(min(sleep_time, 60))
            self.request_count += 1

    async def request(self, operation: str, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Tuple[Any, Any]:
        """GET ``endpoint`` and return ``(payload, headers)``.

        Raises ProviderNotFoundError on 404 and ProviderCallError for any other
        failure, after retrying 429 responses up to ``max_retries`` times.
        """
        if not self.session or not self.authenticator or not self.api_semaphore:
            raise RuntimeError("ApiClient not initialized; use async context manager")

        async with self.api_semaphore:
            await self.check_rate_limit()
            headers = await self.authenticator.get_headers()
            url = endpoint if endpoint.startswith(("http://", "https://")) else f"{self.base_url}{endpoint}"
            backoff = self.retry_429_delay
            attempts = 0
            while True:
                try:
                    async with self.session.get(url, params=params, headers=headers) as response:
                        logger.debug("GET %s -> Status: %s", endpoint, response.status)
                        if response.status == 429 and attempts < self.max_retries:
                            attempts += 1
                            logger.info("Rate limited (429) on %s. Waiting %s seconds...", operation, backoff)
                            await asyncio.sleep(backoff)
                            backoff = min(backoff * self.backoff_multiplier, self.max_retry_delay)
                            continue
                        if response.status == 404:
                            raise ProviderNotFoundError(operation, await response.text(), status_code=404)
                        if response.status >= 400:
                            raise ProviderCallError(operation, await response.text(), status_code=response.status)
                        try:
                            data = await response.json()
                        except (aiohttp.ContentTypeError, ValueError) as exc:
                            raise ProviderCallError(operation, f"invalid JSON body: {exc}", status_code=response.status) from exc
                        return data, response.headers
                except asyncio.TimeoutError as exc:
                    raise ProviderCallError(operation, f"request to {endpoint} timed out") from exc
                except aiohttp.ClientError as exc:
                    raise ProviderCallError(operation, str(exc)) from exc

    async def fetch_one(self, operation: str, endpoint: str) -> Any:
        payload, _ = await self.request(operation, endpoint)
        return payload

    async def fetch_paginated(
        self,
        operation: str,
        endpoint: str,
        items_key: str,
        supports_pagination: bool = True,
        base_params: Optional[Dict[str, Any]] = None,
    ) -> List[Dict]:
        all_items: List[Dict] = []
        params = dict(base_params or {})
        if supports_pagination:
            params.setdefault("limit", 60)
        next_url: Optional[str] = None

        while True:
            payload, headers = await self.request(operation, next_url or endpoint, None if next_url else params)
            if isinstance(payload, list):
                all_items.extend(payload)
            elif isinstance(payload, dict):
                items = payload.get(items_key)
                if not isinstance(items, list):
                    raise ProviderCallError(operation, f"missing '{items_key}' in list payload")
                all_items.extend(items)
            else:
                raise ProviderCallError(operation, f"unexpected list payload of type {type(payload).__name__}")
            if not supports_pagination:
                break
            next_url = self._extract_next_from_link(headers.get("link") if headers else None)
            if not next_url:
                break
        return all_items

    @staticmethod
    def _extract_next_from_link(link_header: Optional[str]) -> Optional[str]:
        if not link_header:
            return None
        parts = [p.strip() for p in link_header.split(",")]
        for part in parts:
            if "rel=\"next\"" in part:
                url_part = part.split(";")[0].strip()
                if url_part.startswith("<") and url_part.endswith(">"):
                    return url_part[1:-1]
        return None
