"""
Tests for the builder-level contracts.
"""
from unittest.mock import MagicMock

import pytest
from pycspr.types.node.rpc import DeployOfModuleBytes, DeployOfStoredContractByHash

from casperdash_sdk.builder import BaseContract, Cep78Contract, MarketplaceContract, MarketplaceInstallArgs
from casperdash_sdk.builder.marketplace import contract_to_byte_array
from casperdash_sdk.casper.cl_values import CLValueBuilder
from casperdash_sdk.casper.deploy import deploy_hash_hex, is_valid_deploy
from casperdash_sdk.config import NetworkConfig
from casperdash_sdk.deployer import Deployer, DeployResult
from casperdash_sdk.exceptions import ConfigurationError, SimulationError
from test_helpers import TEST_CONTRACT_HASH, TEST_PACKAGE_HASH

TOKEN_CONTRACT_HASH = "hash-" + "12" * 32
WASM = b"\x00asm\x01\x00\x00\x00"


@pytest.fixture
def deployer():
    """Deployer mock that records what was sent"""
    mock_deployer = MagicMock(spec=Deployer)
    mock_deployer.send_safe.side_effect = lambda deploy, wait=True: DeployResult(deploy_hash_hex(deploy))
    mock_deployer.send.side_effect = lambda deploy, wait=True: DeployResult(deploy_hash_hex(deploy))
    return mock_deployer


def _sent(deployer, index=0):
    return deployer.send_safe.call_args_list[index][0][0]


class TestBaseContract:
    """Building, signing and sending."""

    def test_build_entry_point(self, key_pair, deployer):
        contract = BaseContract(TEST_CONTRACT_HASH, caller=key_pair, deployer=deployer)
        deploy = contract.build_entry_point("mint", {})

        assert isinstance(deploy.session, DeployOfStoredContractByHash)
        assert deploy.session.entry_point == "mint"
        assert deploy.header.account == key_pair.public_key
        assert deploy.header.chain_name == "casper-test"
        assert deploy.payment.args["amount"] == CLValueBuilder.u512(NetworkConfig.get_payment_amount("casper-test", "entryPoint"))
        assert [a.signer for a in deploy.approvals] == [key_pair.public_key]
        assert is_valid_deploy(deploy)
        deployer.send_safe.assert_not_called()

    def test_build_session_wasm_default_payment(self, key_pair, deployer):
        contract = BaseContract(caller=key_pair, deployer=deployer)
        deploy = contract.build_session_wasm(WASM, {})
        assert isinstance(deploy.session, DeployOfModuleBytes)
        assert deploy.session.module_bytes == WASM
        assert deploy.payment.args["amount"] == CLValueBuilder.u512(15_000_000_000)

    def test_explicit_payment(self, key_pair, deployer):
        contract = BaseContract(TEST_CONTRACT_HASH, caller=key_pair, deployer=deployer)
        deploy = contract.build_entry_point("mint", {}, payment_amount="7000")
        assert deploy.payment.args["amount"] == CLValueBuilder.u512(7000)

    def test_caller_required(self, deployer):
        contract = BaseContract(TEST_CONTRACT_HASH, deployer=deployer)
        with pytest.raises(ConfigurationError):
            contract.call_entry_point("mint", {})
        deployer.send_safe.assert_not_called()

    def test_call_sends_safely(self, key_pair, deployer):
        contract = BaseContract(TEST_CONTRACT_HASH, caller=key_pair, deployer=deployer)
        result = contract.call_entry_point("mint", {}, wait=False)
        deployer.send_safe.assert_called_once()
        assert result.deploy_hash == deploy_hash_hex(_sent(deployer))
        assert deployer.send_safe.call_args[0][1] is False

    def test_simulation_failure_propagates(self, key_pair, deployer):
        deployer.send_safe.side_effect = SimulationError("User error: 1")
        contract = BaseContract(TEST_CONTRACT_HASH, caller=key_pair, deployer=deployer)
        with pytest.raises(SimulationError):
            contract.call_entry_point("mint", {})

    def test_set_caller(self, key_pair, other_key_pair, deployer):
        contract = BaseContract(TEST_CONTRACT_HASH, caller=key_pair, deployer=deployer)
        contract.set_caller(other_key_pair)
        assert contract.get_caller() is other_key_pair
        assert contract.build_entry_point("mint", {}).header.account == other_key_pair.public_key

    def test_default_deployer_from_network(self, key_pair):
        contract = BaseContract(TEST_CONTRACT_HASH, caller=key_pair)
        assert contract.deployer.node.node_url == NetworkConfig.get_node_url("casper-test")
        assert contract.deployer is contract.deployer


class TestCep78Contract:
    """Collection calls used by the marketplace."""

    def test_register_token_owner(self, key_pair, deployer):
        contract = Cep78Contract(TOKEN_CONTRACT_HASH, caller=key_pair, deployer=deployer)
        contract.register_token_owner(key_pair.public_key)
        deploy = _sent(deployer)
        assert deploy.session.entry_point == "register_owner"
        assert deploy.session.args["token_owner"] == CLValueBuilder.key(key_pair.public_key)

    def test_approve_contract_operator(self, key_pair, deployer):
        contract = Cep78Contract(TOKEN_CONTRACT_HASH, caller=key_pair, deployer=deployer)
        contract.approve(contract_to_byte_array(TEST_PACKAGE_HASH), 5)
        deploy = _sent(deployer)
        assert deploy.session.entry_point == "approve"
        assert list(deploy.session.args) == ["operator", "token_id"]
        assert deploy.session.args["operator"] == CLValueBuilder.key(bytes.fromhex("cd" * 32))
        assert deploy.session.args["token_id"] == CLValueBuilder.u64(5)


class TestMarketplaceContract:
    """Install, list and buy."""

    def test_install(self, key_pair, deployer):
        contract = MarketplaceContract(caller=key_pair, deployer=deployer)
        contract.install(WASM, MarketplaceInstallArgs("Casper Punks", "PNK", "1000"))
        deploy = _sent(deployer)
        assert isinstance(deploy.session, DeployOfModuleBytes)
        assert deploy.session.args == {
            "collection_name": CLValueBuilder.string("Casper Punks"),
            "collection_symbol": CLValueBuilder.string("PNK"),
            "total_token_supply": CLValueBuilder.string("1000"),
        }

    def test_list_item(self, key_pair, deployer):
        contract = MarketplaceContract(TEST_CONTRACT_HASH, caller=key_pair, deployer=deployer)
        contract.list_item(TOKEN_CONTRACT_HASH, 5, 100_000_000_000)
        deploy = _sent(deployer)
        assert deploy.session.entry_point == "list_item"
        assert deploy.session.args == {
            "token": CLValueBuilder.byte_array(bytes.fromhex("12" * 32)),
            "token_id": CLValueBuilder.string("5"),
            "amount": CLValueBuilder.u512(100_000_000_000),
        }

    def test_buy_item(self, key_pair, deployer):
        contract = MarketplaceContract(TEST_CONTRACT_HASH, caller=key_pair, deployer=deployer)
        contract.buy_item(WASM, TOKEN_CONTRACT_HASH, "5", 100_000_000_000)
        deploy = _sent(deployer)
        assert isinstance(deploy.session, DeployOfModuleBytes)
        assert list(deploy.session.args) == ["market", "token", "token_id", "amount"]
        assert deploy.session.args["market"] == CLValueBuilder.byte_array(bytes.fromhex("ab" * 32))
        assert deploy.payment.args["amount"] == CLValueBuilder.u512(33010427510)

    def test_buy_item_needs_contract_hash(self, key_pair, deployer):
        contract = MarketplaceContract(caller=key_pair, deployer=deployer)
        with pytest.raises(ConfigurationError):
            contract.buy_item(WASM, TOKEN_CONTRACT_HASH, "5", 1)
        deployer.send_safe.assert_not_called()

    def test_contract_to_byte_array_rejects_short_hash(self):
        with pytest.raises(ValueError):
            contract_to_byte_array("hash-abcd")
