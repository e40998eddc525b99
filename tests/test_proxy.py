from __future__ import annotations

import json

import httpx
import pytest
import respx

from esdt_bridge.errors import ProxyError
from esdt_bridge.rpc.proxy import ProxyClient, ProxyConfig
from esdt_bridge.types.core import NetworkConfig

from .conftest import ALICE, NODE, envelope


@pytest.mark.asyncio
@respx.mock
async def test_network_config() -> None:
    respx.get(f"{NODE}/network/config").mock(
        return_value=httpx.Response(
            200,
            json=envelope(
                {"config": {"erd_chain_id": "T", "erd_min_gas_price": 1_000_000_000, "erd_min_transaction_version": 1}}
            ),
        )
    )
    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        assert await proxy.get_network_config() == NetworkConfig(chain_id="T")


@pytest.mark.asyncio
@respx.mock
async def test_unsuccessful_envelope_raises() -> None:
    respx.get(f"{NODE}/address/{ALICE}").mock(
        return_value=httpx.Response(
            400, json=envelope(None, code="bad_request", error="invalid address")
        )
    )
    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        with pytest.raises(ProxyError) as err:
            await proxy.get_nonce(ALICE)
    assert err.value.code == "bad_request"
    assert err.value.http_status == 400
    assert err.value.message == "invalid address"


@pytest.mark.asyncio
@respx.mock
async def test_non_json_body_raises() -> None:
    respx.get(f"{NODE}/address/{ALICE}").mock(return_value=httpx.Response(502, text="<html>bad gateway</html>"))
    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        with pytest.raises(ProxyError) as err:
            await proxy.get_account(ALICE)
    assert err.value.http_status == 502


@pytest.mark.asyncio
@respx.mock
async def test_transport_error_raises() -> None:
    respx.get(f"{NODE}/address/{ALICE}").mock(side_effect=httpx.ConnectError("refused"))
    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        with pytest.raises(ProxyError, match="transport error"):
            await proxy.get_account(ALICE)


@pytest.mark.asyncio
@respx.mock
async def test_missing_field_raises() -> None:
    respx.get(f"{NODE}/address/{ALICE}/esdt").mock(return_value=httpx.Response(200, json=envelope({})))
    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        with pytest.raises(ProxyError, match="esdts"):
            await proxy.get_esdts(ALICE)


@pytest.mark.asyncio
@respx.mock
async def test_get_transaction_requests_results() -> None:
    route = respx.get(f"{NODE}/transaction/ab12?withResults=true").mock(
        return_value=httpx.Response(200, json=envelope({"transaction": {"status": "pending"}}))
    )
    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        tx = await proxy.get_transaction("ab12")
    assert tx == {"status": "pending"}
    assert route.calls.last.request.url.params["withResults"] == "true"


@pytest.mark.asyncio
@respx.mock
async def test_send_transaction_posts_body() -> None:
    route = respx.post(f"{NODE}/transaction/send").mock(
        return_value=httpx.Response(200, json=envelope({"txHash": "ab12"}))
    )
    body = {"nonce": 1, "sender": ALICE, "signature": "00"}
    async with ProxyClient(ProxyConfig(url=NODE, headers={"User-Agent": "test"})) as proxy:
        assert await proxy.send_transaction(body) == "ab12"
    request = route.calls.last.request
    assert json.loads(request.content) == body
    assert request.headers["User-Agent"] == "test"
