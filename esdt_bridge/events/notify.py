"""
Relay notification: tell the event middleware that a transfer happened.

One `POST /event/transfer` per event, with the identifier in the `id` header
and no body. Only a 2xx answer counts as delivered; redirects are not
followed and fail like any other status.
There is no retry: if this fails the transfer is complete on-chain but the
relay never hears of it, and `NotificationError.event_id` is what the caller
needs to reconcile.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from ..errors import NotificationError
from ..logging import get_logger

log = get_logger(__name__)

TRANSFER_EVENT_PATH = "/event/transfer"


@dataclass
class RelayConfig:
    url: str
    timeout_s: float = 10.0
    headers: Optional[Dict[str, str]] = None


class EventNotifier:
    def __init__(self, config: RelayConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._cfg = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def start(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._cfg.url,
                timeout=self._cfg.timeout_s,
                headers=dict(self._cfg.headers or {}),
                transport=self._transport,
            )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "EventNotifier":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def notify(self, event_id: int) -> None:
        if self._client is None:
            await self.start()
        assert self._client is not None

        try:
            resp = await self._client.post(TRANSFER_EVENT_PATH, headers={"id": str(event_id)})
        except httpx.HTTPError as exc:
            log.error("relay_unreachable", event_id=event_id, error=str(exc))
            raise NotificationError(f"relay unreachable: {exc}", event_id=event_id) from exc

        if not resp.is_success:
            log.error("relay_rejected", event_id=event_id, http_status=resp.status_code)
            raise NotificationError(
                f"relay rejected event: HTTP {resp.status_code}: {resp.text[:256]}",
                event_id=event_id,
                http_status=resp.status_code,
            )
        log.info("relay_notified", event_id=event_id, http_status=resp.status_code)


__all__ = ["EventNotifier", "RelayConfig", "TRANSFER_EVENT_PATH"]
