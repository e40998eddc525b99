"""
Finality and contract-result types.

The gateway reports a transaction as `{status, smartContractResults: [...]}`;
these dataclasses are the typed view the watcher and extractor work on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


class FinalityStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not FinalityStatus.PENDING

    @classmethod
    def from_gateway(cls, status: str) -> "FinalityStatus":
        """`pending` and `success` map directly; every other status is a failure."""
        if status == "pending":
            return cls.PENDING
        if status == "success":
            return cls.SUCCESS
        return cls.FAILED


@dataclass(frozen=True)
class ContractResultRecord:
    nonce: int
    data: str

    @staticmethod
    def from_gateway(d: Mapping[str, Any]) -> "ContractResultRecord":
        return ContractResultRecord(nonce=int(d.get("nonce", 0)), data=str(d.get("data", "")))


@dataclass(frozen=True)
class FinalityResult:
    tx_hash: str
    status: FinalityStatus = FinalityStatus.PENDING
    records: Tuple[ContractResultRecord, ...] = ()
    raw: Optional[Dict[str, Any]] = field(default=None, compare=False)

    def advance(
        self,
        status: FinalityStatus,
        *,
        records: Sequence[ContractResultRecord] = (),
        raw: Optional[Dict[str, Any]] = None,
    ) -> "FinalityResult":
        """
        Next observation of the same transaction. Only PENDING may move, and
        only to PENDING, SUCCESS or FAILED.
        """
        if self.status.is_terminal:
            raise ValueError(f"tx {self.tx_hash} already finalized as {self.status.value}")
        return FinalityResult(tx_hash=self.tx_hash, status=status, records=tuple(records), raw=raw)

    @property
    def succeeded(self) -> bool:
        return self.status is FinalityStatus.SUCCESS


def parse_records(raw_results: Optional[List[Mapping[str, Any]]]) -> Tuple[ContractResultRecord, ...]:
    return tuple(ContractResultRecord.from_gateway(r) for r in (raw_results or ()))


__all__ = ["FinalityStatus", "ContractResultRecord", "FinalityResult", "parse_records"]
