"""Delivery of events to the remote collector and the analytics endpoint."""

from __future__ import annotations

import json
from typing import Any, Callable, Protocol

import httpx

from noteclient.config.models import AnalyticsSettings, CollectorSettings
from noteclient.errors import DeliveryError


class Transport(Protocol):
    async def post_event(self, payload: dict[str, Any]) -> None: ...

    async def send_analytics(self, category: str, action: str) -> None: ...


class HttpTransport:
    """httpx-backed transport; every failure surfaces as DeliveryError."""

    def __init__(
        self,
        collector: CollectorSettings,
        analytics: AnalyticsSettings,
        client_id: Callable[[], str],
        *,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.collector = collector
        self.analytics = analytics
        self.client_id = client_id
        self._http_transport = http_transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.collector.timeout_seconds,
            transport=self._http_transport,
        )

    async def post_event(self, payload: dict[str, Any]) -> None:
        if not self.collector.url:
            raise DeliveryError("No collector url configured")

        body = {"text": json.dumps(payload)}
        await self._post(self.collector.url, json=body)

    async def send_analytics(self, category: str, action: str) -> None:
        if not self.analytics.tracking_id:
            return

        form = {
            "v": str(self.analytics.protocol_version),
            "tid": self.analytics.tracking_id,
            "uid": self.client_id(),
            "t": "event",
            "ec": category,
            "ea": action,
        }
        await self._post(self.analytics.url, data=form)

    async def _post(self, url: str, **kwargs: Any) -> None:
        try:
            async with self._client() as client:
                response = await client.post(url, **kwargs)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DeliveryError(f"POST {url} failed: {exc}") from exc
