"""
esdt_bridge.tx.build
====================

Unsigned transaction builders for every bridge operation.

The builders are pure: they depend only on their arguments, the bridge
contracts configured on the `TxBuilder` and the synced `NetworkConfig`. Two
calls with the same inputs return equal `Transaction` values, and no call
touches the network. The result can be handed to `tx.send.TransactionSubmitter`
or to an external wallet that signs and broadcasts on its own.

Call conventions
----------------
- transfer      : freezeSend@chain@to                       (value → minter)
- unfreeze      : ESDTNFTTransfer@esdt@chain@amount@minter@"withdraw"@to
- transfer_nft  : ESDTNFTTransfer@token@nonce@01@minter@"freezeSendNft"@chain@to
- unfreeze_nft  : ESDTNFTTransfer@esdt_nft@id@01@minter@"withdrawNft"@to
- mint_nft      : ESDTNFTCreate@id@qty@name@royalties@hash@attrs@uri...
- issue_esdt_nft: issueNonFungible@name@ticker[@flag@"true"|"false"]...
- set_roles     : setSpecialRole@token@target@role...

ESDTNFTTransfer calls are sent by the holder to itself; the ledger forwards
the token to the minter together with the nested call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from ..config import BridgeSettings, GasConfig
from ..types.core import Address, NetworkConfig, Transaction
from ..types.requests import ESDT_ROLES, EsdtRole, NftInfo, NftIssueArgs
from .payload import ContractCall

EasyBalance = Union[int, str]

ESDT_ISSUE_ADDR = "erd1qqqqqqqqqqqqqqqpqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqzllls8a5w6u"
ESDT_ISSUE_COST = 50_000_000_000_000_000


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass(frozen=True)
class TxBuilder:
    """
    Builders bound to one bridge deployment.

    minter_address : bech32 address of the minter contract
    esdt           : wrapped fungible ESDT collection
    esdt_nft       : wrapped NFT collection
    network        : chain id / gas price / version for every built tx
    gas            : fixed gas limits per call family
    """

    minter_address: Address
    esdt: str
    esdt_nft: str
    network: NetworkConfig
    gas: GasConfig = field(default_factory=GasConfig)

    @classmethod
    def from_settings(cls, settings: BridgeSettings, network: NetworkConfig) -> "TxBuilder":
        return cls(
            minter_address=settings.minter_address,
            esdt=settings.esdt,
            esdt_nft=settings.esdt_nft,
            network=network,
            gas=settings.gas,
        )

    def _tx(self, receiver: Address, call: ContractCall, gas_limit: int, value: EasyBalance = 0) -> Transaction:
        return Transaction(
            receiver=receiver,
            gas_limit=int(gas_limit),
            data=call.build(),
            chain_id=self.network.chain_id,
            gas_price=self.network.min_gas_price,
            version=self.network.tx_version,
            value=int(value),
        )

    # ------------------------------------------------------------------
    # Transfer kinds
    # ------------------------------------------------------------------

    def transfer(self, chain_nonce: int, to: str, value: EasyBalance) -> Transaction:
        """Lock native currency in the minter for release on `chain_nonce`."""
        call = ContractCall("freezeSend").add_u64(chain_nonce).add_str(to, "ascii")
        return self._tx(self.minter_address, call, self.gas.transfer, value=value)

    def unfreeze(self, chain_nonce: int, address: Address, to: str, value: EasyBalance) -> Transaction:
        """Burn wrapped tokens of `chain_nonce` held by `address` and release them on the origin chain."""
        call = (
            ContractCall("ESDTNFTTransfer")
            .add_token(self.esdt)
            .add_u64(chain_nonce)
            .add_biguint(value)
            .add_address(self.minter_address)
            .add_str("withdraw", "ascii")
            .add_str(to, "ascii")
        )
        return self._tx(address, call, self.gas.transfer)

    def transfer_nft(self, chain_nonce: int, address: Address, to: str, info: NftInfo) -> Transaction:
        call = (
            ContractCall("ESDTNFTTransfer")
            .add_token(info.token)
            .add_u64(info.nonce)
            .add_biguint(1)
            .add_address(self.minter_address)
            .add_str("freezeSendNft", "ascii")
            .add_u64(chain_nonce)
            .add_str(to, "ascii")
        )
        return self._tx(address, call, self.gas.nft)

    def unfreeze_nft(self, address: Address, to: str, wrapped_nonce: int) -> Transaction:
        call = (
            ContractCall("ESDTNFTTransfer")
            .add_token(self.esdt_nft)
            .add_u64(wrapped_nonce)
            .add_biguint(1)
            .add_address(self.minter_address)
            .add_str("withdrawNft", "ascii")
            .add_str(to, "ascii")
        )
        return self._tx(address, call, self.gas.nft)

    # ------------------------------------------------------------------
    # Administrative kinds
    # ------------------------------------------------------------------

    def mint_nft(self, owner: Address, args: NftIssueArgs) -> Transaction:
        call = (
            ContractCall("ESDTNFTCreate")
            .add_token(args.identifier)
            .add_biguint(args.quantity if args.quantity is not None else 1)
            .add_str(args.name)
            .add_u64(args.royalties if args.royalties is not None else 0)
            .add_str(args.hash or "")
            .add_str(args.attrs or "")
        )
        for uri in args.uris:
            call = call.add_str(uri)
        return self._tx(owner, call, self.gas.mint)

    def issue_esdt_nft(
        self,
        name: str,
        ticker: str,
        can_freeze: Optional[bool] = None,
        can_wipe: Optional[bool] = None,
        can_transfer_nft_create_role: Optional[bool] = None,
    ) -> Transaction:
        """
        Issue a non-fungible collection. Flags left as None are not sent at all,
        so the ledger applies its own defaults.
        """
        call = ContractCall("issueNonFungible").add_token(name).add_token(ticker)
        for flag, value in (
            ("canFreeze", can_freeze),
            ("canWipe", can_wipe),
            ("canTransferNFTCreateRole", can_transfer_nft_create_role),
        ):
            if value is not None:
                call = call.add_str(flag, "ascii").add_str(_flag(value), "ascii")
        return self._tx(ESDT_ISSUE_ADDR, call, self.gas.issue, value=ESDT_ISSUE_COST)

    def set_esdt_roles(self, token: str, target: Address, roles: Sequence[EsdtRole]) -> Transaction:
        call = ContractCall("setSpecialRole").add_token(token).add_address(target)
        for role in roles:
            if role not in ESDT_ROLES:
                raise ValueError(f"unknown ESDT role: {role!r}")
            call = call.add_str(role)
        return self._tx(ESDT_ISSUE_ADDR, call, self.gas.roles)


__all__ = ["TxBuilder", "ESDT_ISSUE_ADDR", "ESDT_ISSUE_COST", "EasyBalance"]
