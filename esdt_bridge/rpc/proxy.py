"""
Async REST client for the ledger gateway (proxy).

This adapter is intentionally small. It provides:
- an async HTTP transport with a `{data, error, code}` envelope check
- ergonomic methods for the endpoints the bridge uses:
  * GET  /network/config
  * GET  /address/{addr}            (account nonce & balance)
  * GET  /address/{addr}/esdt       (token holdings)
  * GET  /transaction/{hash}?withResults=true
  * POST /transaction/send

Notes
-----
* Nothing here retries. Every transport error, non-JSON body or envelope whose
  `code` is not "successful" surfaces as `ProxyError`; callers decide whether
  that is a submission, finality or read failure.
* The `httpx.AsyncClient` is owned by the instance and closed by `close()`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx

from ..errors import ProxyError
from ..logging import get_logger
from ..types.core import NetworkConfig

log = get_logger(__name__)

SUCCESS_CODE = "successful"


@dataclass
class ProxyConfig:
    url: str
    timeout_s: float = 10.0
    headers: Optional[Dict[str, str]] = None


class ProxyClient:
    """
    Minimal async client for the ledger REST gateway.
    """

    def __init__(self, config: ProxyConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._cfg = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ---------- lifecycle ----------

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

    async def __aenter__(self) -> "ProxyClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ---------- core transport ----------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
    ) -> Dict[str, Any]:
        """
        Perform one request and return the envelope's `data` object.
        """
        if self._client is None:
            await self.start()
        assert self._client is not None

        try:
            resp = await self._client.request(method, path, params=params, json=json_body)
        except httpx.HTTPError as exc:
            raise ProxyError(f"transport error: {exc}", path=path) from exc

        try:
            body = resp.json()
        except ValueError as exc:
            raise ProxyError(
                "non-JSON response from gateway",
                path=path,
                http_status=resp.status_code,
                data=resp.text[:256],
            ) from exc

        if not isinstance(body, dict):
            raise ProxyError("malformed envelope", path=path, http_status=resp.status_code, data=body)
        code = body.get("code")
        if code != SUCCESS_CODE:
            raise ProxyError(
                str(body.get("error") or "request failed"),
                path=path,
                code=code,
                http_status=resp.status_code,
                data=body,
            )
        data = body.get("data")
        if not isinstance(data, dict):
            raise ProxyError("envelope has no data object", path=path, code=code, data=body)
        return data

    @staticmethod
    def _field(data: Dict[str, Any], key: str, path: str) -> Any:
        if key not in data:
            raise ProxyError(f"missing {key!r} in response", path=path, code=SUCCESS_CODE, data=data)
        return data[key]

    # ---------- typed methods ----------

    async def get_network_config(self) -> NetworkConfig:
        path = "/network/config"
        data = await self._request("GET", path)
        try:
            return NetworkConfig.from_gateway(self._field(data, "config", path))
        except (KeyError, TypeError, ValueError) as exc:
            raise ProxyError(f"invalid network config: {exc}", path=path, data=data) from exc

    async def get_account(self, address: str) -> Dict[str, Any]:
        path = f"/address/{address}"
        data = await self._request("GET", path)
        return self._field(data, "account", path)

    async def get_nonce(self, address: str) -> int:
        account = await self.get_account(address)
        return int(account.get("nonce", 0))

    async def get_balance(self, address: str) -> int:
        account = await self.get_account(address)
        return int(account.get("balance", "0"))

    async def get_esdts(self, address: str) -> Dict[str, Dict[str, Any]]:
        path = f"/address/{address}/esdt"
        data = await self._request("GET", path)
        return dict(self._field(data, "esdts", path) or {})

    async def get_transaction(self, tx_hash: str, *, with_results: bool = True) -> Dict[str, Any]:
        path = f"/transaction/{tx_hash}"
        params = {"withResults": "true"} if with_results else None
        data = await self._request("GET", path, params=params)
        return self._field(data, "transaction", path)

    async def send_transaction(self, tx: Dict[str, Any]) -> str:
        """
        Broadcast a signed transaction (gateway send dict). Returns its hash.
        """
        path = "/transaction/send"
        data = await self._request("POST", path, json_body=tx)
        tx_hash = str(self._field(data, "txHash", path))
        log.debug("proxy_tx_sent", tx_hash=tx_hash, sender=tx.get("sender"), nonce=tx.get("nonce"))
        return tx_hash


__all__ = ["ProxyClient", "ProxyConfig", "SUCCESS_CODE"]
