"""Minimal asynchronous JSON-RPC client for a Sui full node.

Only the two calls the relay needs are implemented: ``unsafe_moveCall``, which
asks the node to build an unsigned Move call transaction, and
``sui_executeTransactionBlock``, which submits the signed transaction.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

import httpx

from .errors import RpcError
from .signer import Signer

logger = logging.getLogger(__name__)

WAIT_FOR_LOCAL_EXECUTION = "WaitForLocalExecution"


@dataclass
class MoveCallRequest:
    """Everything the node needs to build a Move call transaction."""

    signer: str
    package_object_id: str
    module: str
    function: str
    type_arguments: List[str] = field(default_factory=list)
    arguments: List[Any] = field(default_factory=list)
    gas: str | None = None
    gas_budget: str = "0"

    def to_params(self) -> List[Any]:
        return [
            self.signer,
            self.package_object_id,
            self.module,
            self.function,
            self.type_arguments,
            self.arguments,
            self.gas,
            self.gas_budget,
        ]


@dataclass
class TransactionBlockOptions:
    show_input: bool = False
    show_raw_input: bool = False
    show_effects: bool = False
    show_events: bool = False
    show_object_changes: bool = False
    show_balance_changes: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {
            "showInput": self.show_input,
            "showRawInput": self.show_raw_input,
            "showEffects": self.show_effects,
            "showEvents": self.show_events,
            "showObjectChanges": self.show_object_changes,
            "showBalanceChanges": self.show_balance_changes,
        }


@dataclass
class TransactionBytes:
    """Unsigned transaction returned by ``unsafe_moveCall``."""

    tx_bytes: str
    gas: List[Dict[str, Any]] = field(default_factory=list)
    input_objects: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Any) -> "TransactionBytes":
        if not isinstance(payload, dict) or not isinstance(payload.get("txBytes"), str):
            raise RpcError("unsafe_moveCall result is missing txBytes")
        return cls(
            tx_bytes=payload["txBytes"],
            gas=list(payload.get("gas") or []),
            input_objects=list(payload.get("inputObjects") or []),
        )


class LedgerClient(Protocol):
    """What the relay requires from a ledger node connection."""

    async def move_call(self, request: MoveCallRequest) -> TransactionBytes:
        ...

    async def sign_and_execute_transaction_block(
        self,
        tx: TransactionBytes,
        signer: Signer,
        options: TransactionBlockOptions,
        request_type: str = WAIT_FOR_LOCAL_EXECUTION,
    ) -> Dict[str, Any]:
        ...

    async def aclose(self) -> None:
        ...


class SuiClient:
    """JSON-RPC 2.0 client bound to a single node URL.

    ``timeout`` is handed to httpx; ``None`` leaves the deadline to the caller.
    ``transport`` lets tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "SuiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def call(self, method: str, params: List[Any]) -> Any:
        """Send one JSON-RPC request and return its ``result``."""

        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug("-> %s %s", method, self.rpc_url)
        try:
            response = await self._http.post(
                self.rpc_url, json=payload, headers={"content-type": "application/json"}
            )
        except httpx.HTTPError as exc:
            raise RpcError(f"{method} request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise RpcError(
                f"{method} returned HTTP {response.status_code} with a non-JSON body"
            ) from exc

        if isinstance(body, dict) and body.get("error"):
            error = body["error"]
            if isinstance(error, dict):
                raise RpcError(str(error.get("message", error)), code=error.get("code"))
            raise RpcError(str(error))
        if response.is_error:
            raise RpcError(f"{method} returned HTTP {response.status_code}")
        if not isinstance(body, dict) or "result" not in body:
            raise RpcError(f"{method} response has no result")
        return body["result"]

    async def move_call(self, request: MoveCallRequest) -> TransactionBytes:
        result = await self.call("unsafe_moveCall", request.to_params())
        return TransactionBytes.from_dict(result)

    async def sign_and_execute_transaction_block(
        self,
        tx: TransactionBytes,
        signer: Signer,
        options: TransactionBlockOptions,
        request_type: str = WAIT_FOR_LOCAL_EXECUTION,
    ) -> Dict[str, Any]:
        signature = signer.sign_transaction(tx.tx_bytes)
        return await self.call(
            "sui_executeTransactionBlock",
            [tx.tx_bytes, [signature], options.to_dict(), request_type],
        )


__all__ = [
    "LedgerClient",
    "MoveCallRequest",
    "SuiClient",
    "TransactionBlockOptions",
    "TransactionBytes",
    "WAIT_FOR_LOCAL_EXECUTION",
]
