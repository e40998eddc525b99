from __future__ import annotations

import base64
import json
from typing import List, Optional

import httpx
import pytest
import respx

from esdt_bridge.bridge import BridgeHelper, bridge_helper_factory
from esdt_bridge.errors import ExtractionError, FinalityError, NotificationError, ProxyError
from esdt_bridge.tx.send import SignerLocks
from esdt_bridge.types.requests import NftInfo, NftIssueArgs, TransferKind, TransferRequest

from .conftest import ALICE, ESDT_NFT, MINTER, NODE, RELAY, FakeSigner, FakeTime, envelope, tx_status

TX_HASH = "aa11"


def _mock_network() -> respx.Route:
    return respx.get(f"{NODE}/network/config").mock(
        return_value=httpx.Response(
            200,
            json=envelope(
                {"config": {"erd_chain_id": "D", "erd_min_gas_price": 1_000_000_000, "erd_min_transaction_version": 1}}
            ),
        )
    )


def _mock_account(nonce: int = 3) -> respx.Route:
    return respx.get(f"{NODE}/address/{ALICE}").mock(
        return_value=httpx.Response(200, json=envelope({"account": {"nonce": nonce, "balance": "10"}}))
    )


def _mock_gateway(nonce: int = 3) -> respx.Route:
    """Network config, account nonce and broadcast; returns the broadcast route."""
    _mock_network()
    _mock_account(nonce)
    return respx.post(f"{NODE}/transaction/send").mock(
        return_value=httpx.Response(200, json=envelope({"txHash": TX_HASH}))
    )


def _relay_calls() -> int:
    return sum(1 for call in respx.calls if call.request.url.host == "relay.test")


def _mock_status(*replies) -> respx.Route:
    return respx.get(f"{NODE}/transaction/{TX_HASH}?withResults=true").mock(
        side_effect=[httpx.Response(200, json=r) for r in replies]
    )


def _mock_relay(status: int = 200) -> respx.Route:
    return respx.post(f"{RELAY}/event/transfer").mock(return_value=httpx.Response(status))


async def _bridge(settings, t: FakeTime, locks: Optional[SignerLocks] = None) -> BridgeHelper:
    return await bridge_helper_factory(settings, sleep=t.sleep, clock=t.clock, signer_locks=locks)


EVENT_RESULTS = [{"nonce": 0, "data": "@6f6b"}, {"nonce": 1, "data": "@6f6b@07"}]


class RecordingLocks(SignerLocks):
    def __init__(self) -> None:
        super().__init__()
        self.held: List[str] = []

    def hold(self, address: str):
        self.held.append(address)
        return super().hold(address)


@pytest.mark.asyncio
@respx.mock
async def test_native_transfer_end_to_end(settings, signer: FakeSigner, fake_time: FakeTime) -> None:
    send = _mock_gateway()
    _mock_status(tx_status("pending"), tx_status("success", EVENT_RESULTS))
    relay = _mock_relay()

    async with await _bridge(settings, fake_time) as bridge:
        assert bridge.network.chain_id == "D"
        handle, event_id = await bridge.transfer_native_to_foreign(signer, 2, "0xabc", 1000)

    assert handle.tx_hash == TX_HASH
    assert event_id == 7
    assert relay.call_count == 1
    assert relay.calls.last.request.headers["id"] == "7"
    assert fake_time.sleeps == [3.0, 5.0]

    sent = json.loads(send.calls.last.request.content)
    assert sent["receiver"] == MINTER
    assert sent["value"] == "1000"
    assert sent["nonce"] == 3
    assert base64.b64decode(sent["data"]) == b"freezeSend@02@" + b"0xabc".hex().encode()


@pytest.mark.asyncio
@respx.mock
async def test_failed_transfer_never_reaches_relay(settings, signer: FakeSigner, fake_time: FakeTime) -> None:
    _mock_gateway()
    _mock_status(tx_status("fail", []))

    async with await _bridge(settings, fake_time) as bridge:
        with pytest.raises(FinalityError, match="failed to execute txn"):
            await bridge.unfreeze_wrapped(signer, 2, "0xabc", 10)

    assert _relay_calls() == 0


@pytest.mark.asyncio
@respx.mock
async def test_missing_event_id(settings, signer: FakeSigner, fake_time: FakeTime) -> None:
    _mock_gateway()
    _mock_status(tx_status("success", [{"nonce": 1, "data": "@" + b"not ok".hex() + "@07"}]))

    async with await _bridge(settings, fake_time) as bridge:
        with pytest.raises(ExtractionError) as err:
            await bridge.transfer_nft_to_foreign(signer, 2, "0xabc", NftInfo("NFT-a1b2c3", 10))

    assert err.value.tx_hash == TX_HASH
    assert _relay_calls() == 0


@pytest.mark.asyncio
@respx.mock
async def test_relay_failure_keeps_event_id(settings, signer: FakeSigner, fake_time: FakeTime) -> None:
    _mock_gateway()
    _mock_status(tx_status("success", EVENT_RESULTS))
    _mock_relay(status=503)

    async with await _bridge(settings, fake_time) as bridge:
        with pytest.raises(NotificationError) as err:
            await bridge.unfreeze_wrapped_nft(signer, "0xabc", 5)

    assert err.value.event_id == 7


@pytest.mark.asyncio
@respx.mock
async def test_mint_does_not_notify(settings, signer: FakeSigner, fake_time: FakeTime) -> None:
    send = _mock_gateway()
    _mock_status(tx_status("success", []))

    async with await _bridge(settings, fake_time) as bridge:
        handle = await bridge.mint_nft(signer, NftIssueArgs(identifier=ESDT_NFT, name="n"))

    assert handle.tx_hash == TX_HASH
    assert handle.transaction.receiver == ALICE
    assert send.call_count == 1
    assert _relay_calls() == 0


@pytest.mark.asyncio
@respx.mock
async def test_issue_and_roles(settings, signer: FakeSigner, fake_time: FakeTime) -> None:
    send = _mock_gateway()
    _mock_status(tx_status("success", []), tx_status("success", []))

    async with await _bridge(settings, fake_time) as bridge:
        await bridge.issue_esdt_nft(signer, "Name", "TCK", can_freeze=False)
        await bridge.set_esdt_roles(signer, ESDT_NFT, MINTER, ["ESDTRoleNFTCreate"])

    assert send.call_count == 2
    assert _relay_calls() == 0


@pytest.mark.asyncio
@respx.mock
async def test_execute_dispatches_and_validates(settings, signer: FakeSigner, fake_time: FakeTime) -> None:
    _mock_gateway()
    _mock_status(tx_status("success", EVENT_RESULTS))
    relay = _mock_relay()

    async with await _bridge(settings, fake_time) as bridge:
        with pytest.raises(ValueError, match="wrapped_nonce"):
            await bridge.execute(signer, TransferRequest(kind=TransferKind.UNLOCK_NFT, to="0xabc"))
        _, event_id = await bridge.execute(
            signer, TransferRequest(kind=TransferKind.LOCK_NATIVE, to="0xabc", chain_nonce=2, amount=5)
        )

    assert event_id == 7
    assert relay.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_unsigned_builders_stay_offline(settings, fake_time: FakeTime) -> None:
    _mock_network()

    async with await _bridge(settings, fake_time) as bridge:
        tx = bridge.unsigned_transfer_txn(2, "0xabc", 1)
        other = bridge.unsigned_unfreeze_nft_txn(ALICE, "0xabc", 5)

    assert tx.receiver == MINTER and not tx.is_signed
    assert other.receiver == ALICE
    assert len(respx.calls) == 1


@pytest.mark.asyncio
@respx.mock
async def test_handle_txn_event_for_external_wallet(settings, fake_time: FakeTime) -> None:
    _mock_network()
    _mock_status(tx_status("success", EVENT_RESULTS))
    relay = _mock_relay()

    async with await _bridge(settings, fake_time) as bridge:
        assert await bridge.handle_txn_event(TX_HASH) == 7

    assert relay.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_signer_locks_are_used(settings, signer: FakeSigner, fake_time: FakeTime) -> None:
    _mock_gateway()
    _mock_status(tx_status("success", EVENT_RESULTS))
    _mock_relay()
    locks = RecordingLocks()

    async with await _bridge(settings, fake_time, locks) as bridge:
        await bridge.transfer_native_to_foreign(signer, 2, "0xabc", 1)

    assert locks.held == [ALICE]
    assert len(locks) == 0


@pytest.mark.asyncio
@respx.mock
async def test_factory_surfaces_gateway_errors(settings, fake_time: FakeTime) -> None:
    respx.get(f"{NODE}/network/config").mock(return_value=httpx.Response(503, text="down"))
    with pytest.raises(ProxyError):
        await _bridge(settings, fake_time)


@pytest.mark.asyncio
@respx.mock
async def test_inventory_through_facade(settings, fake_time: FakeTime) -> None:
    _mock_network()
    _mock_account()
    respx.get(f"{NODE}/address/{ALICE}/esdt").mock(
        return_value=httpx.Response(
            200,
            json=envelope({"esdts": {"WBRG-abcdef-02": {"tokenIdentifier": "WBRG-abcdef-02", "balance": "4", "nonce": 2}}}),
        )
    )

    async with await _bridge(settings, fake_time) as bridge:
        assert await bridge.balance(ALICE) == 10
        assert await bridge.balance_wrapped_batch(ALICE, [2, 3]) == {2: 4, 3: 0}
        assert await bridge.list_nft(ALICE) == {}


@pytest.mark.asyncio
@respx.mock
async def test_raw_txn_result_skips_settle_delay(settings, fake_time: FakeTime) -> None:
    _mock_network()
    _mock_status(tx_status("pending"), tx_status("success", EVENT_RESULTS))

    async with await _bridge(settings, fake_time) as bridge:
        result = await bridge.raw_txn_result(TX_HASH)

    assert result.succeeded
    assert len(result.records) == 2
    assert fake_time.sleeps == [5.0]
    assert _relay_calls() == 0
