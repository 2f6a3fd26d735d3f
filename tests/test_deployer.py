"""
Tests for the Deployer: speculative validation, broadcast and polling.
"""
import pytest

from casperdash_sdk.casper.cl_values import CLValueBuilder
from casperdash_sdk.casper.deploy import deploy_hash_hex
from casperdash_sdk.casper.rpc import CasperRpcClient
from casperdash_sdk.contracts.base import Contract
from casperdash_sdk.deployer import DEFAULT_POLL_ATTEMPTS, Deployer
from casperdash_sdk.exceptions import (
    ConfigurationError,
    DeployTimeoutError,
    ExecutionError,
    RpcError,
    SimulationError,
)
from casperdash_sdk.models import DeployStatus
from test_helpers import (
    TEST_CHAIN_NAME,
    TEST_CONTRACT_HASH,
    TEST_NODE_URL,
    TEST_SPECULATIVE_URL,
    deploy_info_result,
    failure_entry,
    rpc_result,
    success_entry,
)


@pytest.fixture
def deploy(key_pair):
    args = {"amount": CLValueBuilder.u256(1)}
    return Contract(TEST_CONTRACT_HASH).call_entrypoint(
        "transfer", args, key_pair.public_key, TEST_CHAIN_NAME, 5_000_000_000, [key_pair]
    )


@pytest.fixture
def speculative(requests_mock):
    """Speculative node answering with a configurable execution result"""
    state = {"result": {"Success": {"cost": "100", "effect": {}}}}

    def respond(request, context):
        return rpc_result({"api_version": "1.5.6", "block_hash": "cc" * 32, "execution_result": state["result"]})

    state["route"] = requests_mock.post(TEST_SPECULATIVE_URL, json=respond)
    return state


@pytest.fixture
def deployer():
    return Deployer(CasperRpcClient(TEST_NODE_URL), CasperRpcClient(TEST_SPECULATIVE_URL))


def _polls(rpc_router, responses):
    """Answer info_get_deploy with each response in turn, repeating the last"""
    remaining = list(responses)

    def respond(params):
        return remaining.pop(0) if len(remaining) > 1 else remaining[0]

    rpc_router["info_get_deploy"] = respond


class TestSpeculativeValidation:
    """Dry runs on the speculative node."""

    def test_success_payload_returned(self, deployer, deploy, speculative):
        assert deployer.speculative_validate(deploy) == {"cost": "100", "effect": {}}
        sent = speculative["route"].last_request.json()
        assert sent["method"] == "speculative_exec"
        assert sent["params"]["deploy"]["hash"].lower() == deploy_hash_hex(deploy)

    def test_failure_raises_simulation_error(self, deployer, deploy, speculative):
        speculative["result"] = {"Failure": {"cost": "100", "error_message": "User error: 64658"}}
        with pytest.raises(SimulationError) as exc_info:
            deployer.speculative_validate(deploy)
        assert exc_info.value.error_message == "User error: 64658"

    def test_malformed_result(self, deployer, deploy, speculative):
        speculative["result"] = {}
        with pytest.raises(RpcError):
            deployer.speculative_validate(deploy)

    def test_no_speculative_node(self, deploy):
        with pytest.raises(ConfigurationError):
            Deployer(CasperRpcClient(TEST_NODE_URL)).speculative_execute(deploy)


class TestSendSafe:
    """Validation gates the broadcast."""

    def test_failed_simulation_never_broadcasts(self, deployer, deploy, speculative, rpc_router):
        speculative["result"] = {"Failure": {"error_message": "Out of gas error"}}
        rpc_router["account_put_deploy"] = lambda params: rpc_result({"deploy_hash": deploy_hash_hex(deploy)})
        with pytest.raises(SimulationError):
            deployer.send_safe(deploy)
        assert rpc_router.method_calls("account_put_deploy") == []

    def test_successful_simulation_broadcasts_and_waits(self, deployer, deploy, speculative, rpc_router):
        rpc_router["account_put_deploy"] = lambda params: rpc_result({"deploy_hash": deploy_hash_hex(deploy)})
        _polls(rpc_router, [deploy_info_result(deploy_hash_hex(deploy), [success_entry()])])
        result = deployer.send_safe(deploy)
        assert result.deploy_hash == deploy_hash_hex(deploy)
        assert result.info.status == DeployStatus.COMPLETED
        assert rpc_router.method_calls("account_put_deploy")[0]["deploy"]["hash"].lower() == deploy_hash_hex(deploy)

    def test_send_without_waiting(self, deployer, deploy, rpc_router):
        rpc_router["account_put_deploy"] = lambda params: rpc_result({"deploy_hash": deploy_hash_hex(deploy)})
        result = deployer.send(deploy, wait=False)
        assert result.info is None
        assert rpc_router.method_calls("info_get_deploy") == []


class TestWaitForDeploy:
    """Polling until a terminal result."""

    @pytest.mark.parametrize("pending", [0, 1, 5])
    def test_polls_until_success(self, deployer, rpc_router, pending):
        deploy_hash = "12" * 32
        responses = [deploy_info_result(deploy_hash)] * pending
        responses.append(deploy_info_result(deploy_hash, [success_entry()]))
        _polls(rpc_router, responses)

        info = deployer.wait_for_deploy(deploy_hash)
        assert info.hash == deploy_hash
        assert len(rpc_router.method_calls("info_get_deploy")) == pending + 1

    def test_failure_message_carried(self, deployer, rpc_router):
        deploy_hash = "34" * 32
        _polls(rpc_router, [
            deploy_info_result(deploy_hash),
            deploy_info_result(deploy_hash, [failure_entry("ApiError::InvalidArgument")]),
        ])
        with pytest.raises(ExecutionError) as exc_info:
            deployer.wait_for_deploy(deploy_hash)
        assert exc_info.value.error_message == "ApiError::InvalidArgument"
        assert str(exc_info.value) == "Contract execution: ApiError::InvalidArgument"

    def test_timeout_after_attempt_budget(self, deployer, rpc_router):
        deploy_hash = "56" * 32
        _polls(rpc_router, [deploy_info_result(deploy_hash)])
        with pytest.raises(DeployTimeoutError) as exc_info:
            deployer.wait_for_deploy(deploy_hash)
        assert exc_info.value.attempts == DEFAULT_POLL_ATTEMPTS
        assert len(rpc_router.method_calls("info_get_deploy")) == DEFAULT_POLL_ATTEMPTS

    def test_sleeps_between_attempts_only(self, rpc_router, monkeypatch):
        import casperdash_sdk.deployer as deployer_module

        sleeps = []
        monkeypatch.setattr(deployer_module.time, "sleep", lambda seconds: sleeps.append(seconds))
        deployer = Deployer(CasperRpcClient(TEST_NODE_URL), poll_attempts=3, poll_interval=0.25)
        _polls(rpc_router, [deploy_info_result("78" * 32)])
        with pytest.raises(DeployTimeoutError):
            deployer.wait_for_deploy("78" * 32)
        assert sleeps == [0.25, 0.25]

    def test_transport_errors_propagate(self, deployer, rpc_router):
        with pytest.raises(RpcError):
            deployer.wait_for_deploy("9a" * 32)


class TestFromNetwork:
    """Construction from the packaged network configuration."""

    def test_overrides(self):
        deployer = Deployer.from_network("casper-test", node_url=TEST_NODE_URL, speculative_node_url=TEST_SPECULATIVE_URL)
        assert deployer.node.node_url == TEST_NODE_URL
        assert deployer.speculative_node.node_url == TEST_SPECULATIVE_URL

    def test_network_without_speculative_node(self, monkeypatch):
        monkeypatch.delenv("CASPER_SPECULATIVE_NODE_URL", raising=False)
        deployer = Deployer.from_network("casper", poll_attempts=10)
        assert deployer.speculative_node is None
        assert deployer.poll_attempts == 10
