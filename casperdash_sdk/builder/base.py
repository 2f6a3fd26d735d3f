"""
Builder-level contract base: build a deploy for the current caller and send it safely.
"""
import logging
from typing import Any, Dict, Optional

from ..casper.cl_values import RuntimeArgs
from ..casper.deploy import Amount, Deploy, deploy_hash_hex
from ..casper.keys import KeyPair
from ..config import DEFAULT_NETWORK, NetworkConfig
from ..contracts.base import Contract
from ..deployer import Deployer, DeployResult
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class BaseContract:
    """
    A contract bound to a caller key and a Deployer.

    `build_*` methods return a signed Deploy without sending it.
    `call_*` methods build and immediately send through `send_safe`, so a
    deploy that fails speculative execution is never broadcast.
    """

    def __init__(
        self,
        contract_hash: Optional[str] = None,
        contract_package_hash: Optional[str] = None,
        network: str = DEFAULT_NETWORK,
        caller: Optional[KeyPair] = None,
        deployer: Optional[Deployer] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the contract

        Args:
            contract_hash: Contract hash ("hash-" prefix allowed)
            contract_package_hash: Contract package hash
            network: Network name from the packaged configuration
            caller: Key pair that signs and pays for deploys
            deployer: Deployer to send with (defaults to one built for `network`)
            logger: Optional logger instance
        """
        self.contract = Contract(contract_hash, contract_package_hash)
        self.network = network
        self.caller = caller
        self._deployer = deployer
        self.logger = logger or logging.getLogger(__name__)

    @property
    def contract_hash(self) -> Optional[str]:
        return self.contract.contract_hash

    @property
    def deployer(self) -> Deployer:
        if self._deployer is None:
            self._deployer = Deployer.from_network(self.network, logger=self.logger)
        return self._deployer

    @property
    def chain_name(self) -> str:
        return NetworkConfig.get_chain_name(self.network)

    def set_caller(self, keys: KeyPair) -> None:
        self.caller = keys

    def get_caller(self) -> KeyPair:
        """
        Get the caller key pair

        Raises:
            ConfigurationError: If no caller has been set
        """
        if self.caller is None:
            raise ConfigurationError("No caller set; call set_caller() first")
        return self.caller

    def default_payment(self, kind: str) -> int:
        return NetworkConfig.get_payment_amount(self.network, kind)

    def build_entry_point(
        self,
        entry_point: str,
        args: RuntimeArgs,
        payment_amount: Optional[Amount] = None,
    ) -> Deploy:
        """Build a deploy calling `entry_point`, signed by the caller"""
        caller = self.get_caller()
        if payment_amount is None:
            payment_amount = self.default_payment("entryPoint")
        return self.contract.call_entrypoint(
            entry_point,
            args,
            caller.public_key,
            self.chain_name,
            payment_amount,
            [caller],
        )

    def build_session_wasm(
        self,
        wasm: bytes,
        args: RuntimeArgs,
        payment_amount: Optional[Amount] = None,
    ) -> Deploy:
        """Build a session-code deploy, signed by the caller"""
        caller = self.get_caller()
        if payment_amount is None:
            payment_amount = self.default_payment("session")
        return self.contract.call_session_wasm(
            wasm,
            args,
            payment_amount,
            caller.public_key,
            self.chain_name,
            [caller],
        )

    def call_entry_point(
        self,
        entry_point: str,
        args: RuntimeArgs,
        payment_amount: Optional[Amount] = None,
        wait: bool = True,
    ) -> DeployResult:
        deploy = self.build_entry_point(entry_point, args, payment_amount)
        self.logger.info(f"Calling {entry_point} ({deploy_hash_hex(deploy)})")
        return self.send_safe(deploy, wait)

    def call_session_wasm(
        self,
        wasm: bytes,
        args: RuntimeArgs,
        payment_amount: Optional[Amount] = None,
        wait: bool = True,
    ) -> DeployResult:
        deploy = self.build_session_wasm(wasm, args, payment_amount)
        self.logger.info(f"Running session code ({deploy_hash_hex(deploy)})")
        return self.send_safe(deploy, wait)

    def speculative_execute(self, deploy: Deploy) -> Dict[str, Any]:
        return self.deployer.speculative_execute(deploy)

    def send(self, deploy: Deploy, wait: bool = True) -> DeployResult:
        return self.deployer.send(deploy, wait)

    def send_safe(self, deploy: Deploy, wait: bool = True) -> DeployResult:
        return self.deployer.send_safe(deploy, wait)
