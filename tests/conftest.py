import asyncio
import base64

import pytest
from fastapi.testclient import TestClient
from nacl.signing import SigningKey

from inference_relay.api import create_app
from inference_relay.config import RelayConfig
from inference_relay.signer import Signer
from inference_relay.sui_client import TransactionBytes

TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)
TEST_RPC_URL = "http://sui-node.test"
STUB_ADDRESS = "0x" + "ab" * 32
STUB_TX_BYTES = base64.b64encode(b"unsigned-move-call").decode("ascii")
CANNED_RESULT = {
    "digest": "8qzdJtxrMCPw4b9sL3yUa3yuuPbYAuX7kaTgt3pUKqrw",
    "effects": {"status": {"status": "success"}},
    "confirmedLocalExecution": True,
}


class StubSignerFactory:
    """Stands in for ``Signer.from_mnemonic`` and counts invocations."""

    def __init__(self, error=None):
        self.error = error
        self.mnemonics = []

    def __call__(self, mnemonic):
        self.mnemonics.append(mnemonic)
        if self.error is not None:
            raise self.error
        return Signer(address=STUB_ADDRESS, private_key=SigningKey(bytes(range(32))))


class StubLedger:
    """Records every ledger call; fails or stalls on request."""

    def __init__(self, result=None, move_call_error=None, execute_error=None, delay=0.0):
        self.result = CANNED_RESULT if result is None else result
        self.move_call_error = move_call_error
        self.execute_error = execute_error
        self.delay = delay
        self.move_calls = []
        self.executions = []
        self.closed = False

    async def move_call(self, request):
        self.move_calls.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.move_call_error is not None:
            raise self.move_call_error
        return TransactionBytes(tx_bytes=STUB_TX_BYTES)

    async def sign_and_execute_transaction_block(self, tx, signer, options, request_type):
        self.executions.append((tx, signer, options, request_type))
        if self.execute_error is not None:
            raise self.execute_error
        return self.result

    async def aclose(self):
        self.closed = True


class StubLedgerFactory:
    def __init__(self, ledger):
        self.ledger = ledger
        self.urls = []

    def __call__(self, rpc_url):
        self.urls.append(rpc_url)
        return self.ledger


@pytest.fixture
def config():
    return RelayConfig(mnemonic=TEST_MNEMONIC, rpc_url=TEST_RPC_URL, call_timeout=5.0)


@pytest.fixture
def ledger():
    return StubLedger()


@pytest.fixture
def ledger_factory(ledger):
    return StubLedgerFactory(ledger)


@pytest.fixture
def signer_factory():
    return StubSignerFactory()


@pytest.fixture
def client(config, signer_factory, ledger_factory):
    app = create_app(config, signer_factory=signer_factory, ledger_factory=ledger_factory)
    with TestClient(app) as test_client:
        yield test_client
