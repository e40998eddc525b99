"""
esdt_bridge.tx.watch
====================

Wait for a broadcast transaction to reach a terminal state.

Protocol
--------
1. Sleep `settle_delay_s` so the gateway has indexed the transaction.
2. `GET /transaction/{hash}?withResults=true`
   - status "pending"  → sleep the poll interval, poll again
   - status "success"  → terminal success
   - any other status  → terminal failure
3. Anything other than a well-formed successful envelope raises
   `FinalityError` at once; only the pending state is polled again.

The wait is bounded by `timeout_s` (None disables the bound) and surfaces as
`FinalityTimeout`. The poll interval may grow by `backoff` up to
`max_poll_interval_s`. Cancelling the awaiting task cancels the sleep.

`sleep` and `clock` are injectable so tests can drive the loop without real
time passing.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from ..config import FinalityConfig
from ..errors import FinalityError, FinalityTimeout, ProxyError
from ..logging import get_logger
from ..rpc.proxy import ProxyClient
from ..types.results import FinalityResult, FinalityStatus, parse_records

log = get_logger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]
ClockFn = Callable[[], float]

_UNSET: Any = object()


class FinalityWatcher:
    def __init__(
        self,
        proxy: ProxyClient,
        config: Optional[FinalityConfig] = None,
        *,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
    ) -> None:
        self._proxy = proxy
        self._cfg = config or FinalityConfig()
        self._sleep = sleep
        self._clock = clock

    async def _query(self, tx_hash: str) -> Dict[str, Any]:
        try:
            return await self._proxy.get_transaction(tx_hash, with_results=True)
        except ProxyError as exc:
            raise FinalityError(f"failed to query transaction: {exc}", tx_hash=tx_hash) from exc

    async def poll(self, tx_hash: str) -> FinalityResult:
        """One status query, no waiting."""
        return self._observe(FinalityResult(tx_hash=tx_hash), await self._query(tx_hash))

    def _observe(self, current: FinalityResult, info: Dict[str, Any]) -> FinalityResult:
        status = info.get("status") if isinstance(info, dict) else None
        if not isinstance(status, str):
            raise FinalityError("transaction status missing from response", tx_hash=current.tx_hash, raw=info)
        try:
            records = parse_records(info.get("smartContractResults"))
        except (TypeError, ValueError, AttributeError) as exc:
            raise FinalityError(
                f"malformed smart contract results: {exc}", tx_hash=current.tx_hash, status=status, raw=info
            ) from exc
        return current.advance(FinalityStatus.from_gateway(status), records=records, raw=info)

    async def wait(self, tx_hash: str, *, timeout_s: Any = _UNSET, settle: bool = True) -> FinalityResult:
        """
        Block the calling task until `tx_hash` is SUCCESS or FAILED.

        Returns the terminal `FinalityResult` in both cases; use
        `wait_success` to turn FAILED into an exception. With `settle=False`
        the first poll goes out at once, for transactions broadcast earlier.
        """
        if timeout_s is _UNSET:
            timeout_s = self._cfg.timeout_s
        started = self._clock()
        deadline = started + timeout_s if timeout_s is not None else None

        if settle:
            await self._sleep(self._cfg.settle_delay_s)

        result = FinalityResult(tx_hash=tx_hash)
        interval = self._cfg.poll_interval_s
        polls = 0
        while True:
            info = await self._query(tx_hash)
            polls += 1
            result = self._observe(result, info)

            if result.status.is_terminal:
                log.info(
                    "tx_finalized",
                    tx_hash=tx_hash,
                    status=result.status.value,
                    polls=polls,
                    records=len(result.records),
                )
                return result

            log.debug("finality_poll", tx_hash=tx_hash, status=info.get("status"), polls=polls)
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise FinalityTimeout(
                        f"still pending after {polls} polls",
                        tx_hash=tx_hash,
                        status=FinalityStatus.PENDING.value,
                        raw=info,
                        timeout_s=timeout_s,
                    )
                await self._sleep(min(interval, remaining))
            else:
                await self._sleep(interval)
            interval = min(interval * self._cfg.backoff, max(self._cfg.max_poll_interval_s, self._cfg.poll_interval_s))

    async def wait_success(self, tx_hash: str, *, timeout_s: Any = _UNSET, settle: bool = True) -> FinalityResult:
        result = await self.wait(tx_hash, timeout_s=timeout_s, settle=settle)
        if not result.succeeded:
            status = (result.raw or {}).get("status")
            log.warning("tx_failed", tx_hash=tx_hash, status=status)
            raise FinalityError("failed to execute txn", tx_hash=tx_hash, status=status, raw=result.raw)
        return result


__all__ = ["FinalityWatcher", "SleepFn", "ClockFn"]
