"""FastAPI application relaying inference requests to the Sui contract."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Awaitable, Callable, TypeVar

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from . import __version__
from .config import RelayConfig
from .contract import EXECUTION_OPTIONS, build_move_call
from .errors import ClientDisconnected, UpstreamError
from .schemas import HelloResponse, InferenceRequest, ResponseEnvelope
from .signer import Signer
from .sui_client import WAIT_FOR_LOCAL_EXECUTION, LedgerClient, SuiClient

logger = logging.getLogger(__name__)

HELLO_MESSAGE = "Hello, World!"
SUCCESS_MESSAGE = "Transaction executed successfully"
BAD_REQUEST_MESSAGE = "Invalid JSON request body"
DISCONNECT_POLL_INTERVAL = 0.5
CLIENT_CLOSED_REQUEST = 499

SignerFactory = Callable[[str], Signer]
LedgerFactory = Callable[[str], LedgerClient]

T = TypeVar("T")


def _envelope_response(envelope: ResponseEnvelope, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        jsonable_encoder(envelope.model_dump(exclude_none=True)), status_code=status_code
    )


def _upstream_failure(stage: str, exc: Exception) -> JSONResponse:
    detail = f"{stage}: {exc}"
    logger.error(detail)
    return _envelope_response(ResponseEnvelope(message=stage, error=detail), status_code=500)


async def _await_with_deadline(request: Request, awaitable: Awaitable[T], deadline: float) -> T:
    """Await *awaitable* until the loop time *deadline*.

    The call is cancelled when the deadline passes or the client disconnects.
    """

    loop = asyncio.get_running_loop()
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise UpstreamError("deadline exceeded waiting for the ledger node")
            done, _ = await asyncio.wait({task}, timeout=min(remaining, DISCONNECT_POLL_INTERVAL))
            if done:
                return task.result()
            if await request.is_disconnected():
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()


def create_app(
    config: RelayConfig,
    *,
    signer_factory: SignerFactory = Signer.from_mnemonic,
    ledger_factory: LedgerFactory = SuiClient,
) -> FastAPI:
    """Build the relay application around an already loaded *config*.

    ``signer_factory`` turns the mnemonic into a :class:`Signer`;
    ``ledger_factory`` opens a ledger client for the configured RPC URL and is
    called once per ``/run`` request.
    """

    app = FastAPI(title="Inference Relay", version=__version__)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in exc.errors()
        )
        logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
        return _envelope_response(
            ResponseEnvelope(message=BAD_REQUEST_MESSAGE, error=errors), status_code=400
        )

    @app.get("/hello", response_model=HelloResponse)
    def hello() -> HelloResponse:
        return HelloResponse(message=HELLO_MESSAGE)

    @app.post("/run")
    async def run_inference(payload: InferenceRequest, request: Request) -> Response:
        """Build, sign and submit an ``Inference::run`` call for *payload*."""

        deadline = asyncio.get_running_loop().time() + config.call_timeout

        # Collaborators may raise anything; every failure is reported with its
        # own message. CancelledError is a BaseException and passes through.
        try:
            signer = signer_factory(config.mnemonic)
        except Exception as exc:
            return _upstream_failure("Failed to create signer", exc)

        try:
            ledger = ledger_factory(config.rpc_url)
        except Exception as exc:
            return _upstream_failure("Failed to create ledger client", exc)

        try:
            move_call = build_move_call(signer.address, payload.to_call())
            try:
                tx = await _await_with_deadline(request, ledger.move_call(move_call), deadline)
            except ClientDisconnected:
                raise
            except Exception as exc:
                return _upstream_failure("MoveCall error", exc)

            try:
                result = await _await_with_deadline(
                    request,
                    ledger.sign_and_execute_transaction_block(
                        tx, signer, EXECUTION_OPTIONS, WAIT_FOR_LOCAL_EXECUTION
                    ),
                    deadline,
                )
            except ClientDisconnected:
                raise
            except Exception as exc:
                return _upstream_failure("Transaction execution error", exc)
        except ClientDisconnected:
            logger.warning("Client disconnected, cancelled in-flight ledger call")
            return Response(status_code=CLIENT_CLOSED_REQUEST)
        finally:
            await ledger.aclose()

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Transaction result:\n%s", json.dumps(result, indent=2, default=str))
        digest = result.get("digest") if isinstance(result, dict) else None
        logger.info("Transaction executed for %s: %s", signer.address, digest)
        return _envelope_response(ResponseEnvelope(message=SUCCESS_MESSAGE, data=result))

    return app


__all__ = ["create_app"]
