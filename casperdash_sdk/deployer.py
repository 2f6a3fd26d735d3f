"""
Deploy orchestration: speculative validation, broadcast and polling to finality.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .casper.deploy import Deploy, deploy_hash_hex
from .casper.rpc import CasperRpcClient
from .config import DEFAULT_NETWORK, NetworkConfig
from .exceptions import (
    ConfigurationError,
    DeployTimeoutError,
    ExecutionError,
    RpcError,
    SimulationError,
)
from .models import DeployInfo, SpeculativeResult

logger = logging.getLogger(__name__)

DEFAULT_POLL_ATTEMPTS = 300
DEFAULT_POLL_INTERVAL = 1.0


@dataclass
class DeployResult:
    """Outcome of `Deployer.send`"""
    deploy_hash: str
    # None when the deploy was sent without waiting
    info: Optional[DeployInfo] = None


class Deployer:
    """
    Sends deploys to a node.

    A deploy that fails speculative execution is never broadcast by
    `send_safe`. Polling is the only retry loop: a fixed interval, a fixed
    number of attempts and no backoff.
    """

    def __init__(
        self,
        node: CasperRpcClient,
        speculative_node: Optional[CasperRpcClient] = None,
        poll_attempts: int = DEFAULT_POLL_ATTEMPTS,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the Deployer

        Args:
            node: RPC client of the primary node
            speculative_node: RPC client of the speculative-execution node
            poll_attempts: Number of status queries before giving up
            poll_interval: Seconds to wait between status queries
            logger: Optional logger instance to use for progress logging
        """
        self.node = node
        self.speculative_node = speculative_node
        self.poll_attempts = poll_attempts
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_network(
        cls,
        network: str = DEFAULT_NETWORK,
        node_url: Optional[str] = None,
        speculative_node_url: Optional[str] = None,
        **kwargs,
    ) -> "Deployer":
        """
        Create a Deployer for a named network

        Args:
            network: Network name from the packaged configuration
            node_url: Optional node URL override
            speculative_node_url: Optional speculative node URL override
            **kwargs: Passed through to the constructor
        """
        node = CasperRpcClient(NetworkConfig.get_node_url(network, node_url))
        spec_url = NetworkConfig.get_speculative_node_url(network, speculative_node_url)
        speculative_node = CasperRpcClient(spec_url) if spec_url else None
        return cls(node, speculative_node, **kwargs)

    def speculative_execute(self, deploy: Deploy) -> Dict[str, Any]:
        """
        Dry-run a deploy on the speculative node

        Returns:
            The raw `speculative_exec` result

        Raises:
            ConfigurationError: If no speculative node is configured
        """
        if self.speculative_node is None:
            raise ConfigurationError("A speculative node is required for speculative execution")
        return self.speculative_node.speculative_exec(deploy)

    def speculative_validate(self, deploy: Deploy) -> Dict[str, Any]:
        """
        Dry-run a deploy and fail on a simulated failure

        Returns:
            The Success payload of the speculative execution

        Raises:
            SimulationError: If the speculative execution reports Failure
            RpcError: If the result cannot be parsed
        """
        raw = self.speculative_execute(deploy)
        try:
            result = SpeculativeResult.model_validate(raw).execution_result
        except ValidationError as e:
            raise RpcError(f"Unexpected speculative_exec result: {e}", data=raw) from e

        if result.failure is not None:
            self.logger.warning(f"Speculative execution of {deploy_hash_hex(deploy)} failed: {result.failure.error_message}")
            raise SimulationError(result.failure.error_message)
        return result.success

    def broadcast(self, deploy: Deploy) -> str:
        """Submit a deploy to the primary node and return its hash"""
        deploy_hash = self.node.put_deploy(deploy)
        self.logger.info(f"Deploy hash: {deploy_hash}")
        return deploy_hash

    def wait_for_deploy(self, deploy_hash: str) -> DeployInfo:
        """
        Poll the node until the deploy has an execution result

        Returns:
            Deploy info of the successful deploy

        Raises:
            ExecutionError: If the deploy finalized with a failure
            DeployTimeoutError: If no result appeared within the attempt budget
            RpcError: If a status query fails
        """
        self.logger.info(f"Waiting for deploy {deploy_hash}...")
        for attempt in range(1, self.poll_attempts + 1):
            raw = self.node.get_deploy(deploy_hash)
            try:
                info = DeployInfo.model_validate(raw)
            except ValidationError as e:
                raise RpcError(f"Unexpected info_get_deploy result: {e}", data=raw) from e

            if info.is_pending:
                self.logger.debug(f"Deploy {deploy_hash} pending (attempt {attempt}/{self.poll_attempts})")
                if attempt < self.poll_attempts:
                    time.sleep(self.poll_interval)
                continue

            result = info.execution_results[0].result
            if result.failure is not None:
                raise ExecutionError(deploy_hash, result.failure.error_message)
            self.logger.info(f"Deploy {deploy_hash} succeeded")
            return info

        raise DeployTimeoutError(deploy_hash, self.poll_attempts)

    def send(self, deploy: Deploy, wait: bool = True) -> DeployResult:
        """Broadcast a deploy and, unless `wait` is False, poll it to finality"""
        deploy_hash = self.broadcast(deploy)
        if not wait:
            return DeployResult(deploy_hash)
        return DeployResult(deploy_hash, self.wait_for_deploy(deploy_hash))

    def send_safe(self, deploy: Deploy, wait: bool = True) -> DeployResult:
        """
        Validate speculatively, then send

        Raises:
            SimulationError: If speculative execution fails; nothing is broadcast
        """
        self.speculative_validate(deploy)
        return self.send(deploy, wait)
