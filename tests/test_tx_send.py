from __future__ import annotations

import asyncio
import json

import httpx
import pytest
import respx

from esdt_bridge.errors import SubmissionError
from esdt_bridge.rpc.proxy import ProxyClient, ProxyConfig
from esdt_bridge.tx.build import TxBuilder
from esdt_bridge.tx.send import SignerLocks, TransactionSubmitter

from .conftest import ALICE, BOB, MINTER, NODE, FakeSigner, envelope


def _account(nonce: int) -> httpx.Response:
    return httpx.Response(200, json=envelope({"account": {"nonce": nonce, "balance": "0"}}))


@pytest.mark.asyncio
@respx.mock
async def test_submit_binds_nonce_and_signs(settings, network, signer: FakeSigner) -> None:
    respx.get(f"{NODE}/address/{ALICE}").mock(return_value=_account(7))
    send = respx.post(f"{NODE}/transaction/send").mock(
        return_value=httpx.Response(200, json=envelope({"txHash": "aa11"}))
    )
    tx = TxBuilder.from_settings(settings, network).transfer(2, "0xabc", 1000)

    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        handle = await TransactionSubmitter(proxy).submit(signer, tx)

    assert handle.tx_hash == "aa11"
    assert handle.transaction.nonce == 7
    assert handle.transaction.sender == ALICE

    signed_over = json.loads(signer.messages[0])
    assert signed_over["nonce"] == 7
    assert signed_over["receiver"] == MINTER
    assert "signature" not in signed_over

    sent = json.loads(send.calls.last.request.content)
    assert sent["signature"] == ("5a" * 64)
    assert sent["value"] == "1000"
    assert sent["sender"] == ALICE


@pytest.mark.asyncio
@respx.mock
async def test_rejected_broadcast(settings, network, signer: FakeSigner) -> None:
    respx.get(f"{NODE}/address/{ALICE}").mock(return_value=_account(3))
    respx.post(f"{NODE}/transaction/send").mock(
        return_value=httpx.Response(
            400, json=envelope(None, code="internal_issue", error="insufficient funds")
        )
    )
    tx = TxBuilder.from_settings(settings, network).transfer(2, "0xabc", 1000)

    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        with pytest.raises(SubmissionError) as err:
            await TransactionSubmitter(proxy).submit(signer, tx)

    assert err.value.nonce == 3
    assert err.value.sender == ALICE
    assert "insufficient funds" in err.value.message


@pytest.mark.asyncio
@respx.mock
async def test_nonce_sync_failure(settings, network, signer: FakeSigner) -> None:
    respx.get(f"{NODE}/address/{ALICE}").mock(return_value=httpx.Response(503, text="unavailable"))
    tx = TxBuilder.from_settings(settings, network).transfer(2, "0xabc", 1)

    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        with pytest.raises(SubmissionError, match="nonce"):
            await TransactionSubmitter(proxy).submit(signer, tx)
    assert len(respx.calls) == 1


class ExplodingSigner(FakeSigner):
    def sign(self, message: bytes) -> bytes:
        raise RuntimeError("hardware wallet disconnected")


@pytest.mark.asyncio
@respx.mock
async def test_signer_failure(settings, network) -> None:
    respx.get(f"{NODE}/address/{ALICE}").mock(return_value=_account(1))
    tx = TxBuilder.from_settings(settings, network).transfer(2, "0xabc", 1)

    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        with pytest.raises(SubmissionError, match="signing failed"):
            await TransactionSubmitter(proxy).submit(ExplodingSigner(), tx)
    assert len(respx.calls) == 1


@pytest.mark.asyncio
@respx.mock
async def test_empty_signature_rejected(settings, network) -> None:
    respx.get(f"{NODE}/address/{ALICE}").mock(return_value=_account(1))
    tx = TxBuilder.from_settings(settings, network).transfer(2, "0xabc", 1)
    async with ProxyClient(ProxyConfig(url=NODE)) as proxy:
        with pytest.raises(SubmissionError, match="empty signature"):
            await TransactionSubmitter(proxy).submit(FakeSigner(signature=b""), tx)


@pytest.mark.asyncio
async def test_signer_locks_serialize_per_address() -> None:
    locks = SignerLocks()
    order = []

    async def submit(tag: str, address: str) -> None:
        async with locks.hold(address):
            order.append(f"{tag}-in")
            assert len(locks) >= 1
            await asyncio.sleep(0)
            order.append(f"{tag}-out")

    await asyncio.gather(submit("a", ALICE), submit("b", ALICE))
    assert order == ["a-in", "a-out", "b-in", "b-out"]

    order.clear()
    await asyncio.gather(submit("a", ALICE), submit("c", BOB))
    assert order == ["a-in", "c-in", "a-out", "c-out"]


@pytest.mark.asyncio
async def test_signer_locks_drop_idle_entries() -> None:
    locks = SignerLocks()
    async with locks.hold(ALICE):
        async with locks.hold(BOB):
            assert len(locks) == 2
        assert len(locks) == 1
    assert len(locks) == 0

    with pytest.raises(RuntimeError):
        async with locks.hold(ALICE):
            raise RuntimeError("broadcast failed")
    assert len(locks) == 0
