"""
Pytest fixtures for the CasperDash SDK tests.
"""
import time

import pytest

from casperdash_sdk._rate_limited_log import reset_rate_limits
from casperdash_sdk.casper.keys import KeyAlgorithm, KeyPair
from casperdash_sdk.config import NetworkConfig
from test_helpers import TEST_NODE_URL, rpc_error


# Make time.sleep instantaneous so deploy polling doesn't slow the suite down
@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _fresh_state():
    """Clear process-wide caches between tests"""
    reset_rate_limits()
    NetworkConfig._networks_cache = None
    yield
    reset_rate_limits()
    NetworkConfig._networks_cache = None


@pytest.fixture
def key_pair():
    """Deterministic Ed25519 key pair"""
    return KeyPair.from_private_bytes(bytes(range(32)))


@pytest.fixture
def other_key_pair():
    return KeyPair.from_private_bytes(bytes(range(32, 64)))


@pytest.fixture
def secp_key_pair():
    return KeyPair.from_private_bytes(b"\x01" * 32, KeyAlgorithm.SECP256K1)


class RpcRouter(dict):
    """Method name -> handler(params) returning a JSON-RPC response body"""

    def __init__(self):
        super().__init__()
        self.calls = []

    def method_calls(self, method):
        return [params for m, params in self.calls if m == method]


def _route(router):
    def dispatch(request, context):
        body = request.json()
        method = body["method"]
        router.calls.append((method, body.get("params")))
        if method not in router:
            return rpc_error(-32601, f"Method not found: {method}")
        return router[method](body.get("params"))
    return dispatch


@pytest.fixture
def rpc_router(requests_mock):
    """Route JSON-RPC calls on TEST_NODE_URL by method name"""
    router = RpcRouter()
    requests_mock.post(TEST_NODE_URL, json=_route(router))
    return router
