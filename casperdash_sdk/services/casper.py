"""
Read-mostly helpers over a Casper node: blocks, deploy status and global state.
"""
import base64
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pycspr
from pycspr.types.cl import CLV_Key
from pydantic import ValidationError

from .._rate_limited_log import rate_limited_log
from ..casper.cl_values import CLValueBuilder
from ..casper.deploy import deploy_from_json, deploy_hash_hex, is_valid_deploy
from ..casper.keys import PublicKey
from ..casper.rpc import CasperRpcClient
from ..config import DEFAULT_NETWORK, NetworkConfig
from ..contracts.base import stored_cl_value
from ..exceptions import CasperDashError, ConfigurationError
from ..models import DeployInfo, DeployStatusEntry
from ..utils import cl_to_native

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class CasperServices:
    """
    Node queries used by wallets and dashboards.

    Batch methods fan out over a thread pool and return results in input order.
    """

    def __init__(
        self,
        node_url: Optional[str] = None,
        rpc: Optional[CasperRpcClient] = None,
        network: str = DEFAULT_NETWORK,
        max_workers: int = DEFAULT_MAX_WORKERS,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the service

        Args:
            node_url: Node RPC URL (defaults to the network's node)
            rpc: Existing RPC client to reuse instead of `node_url`
            network: Network name used when no URL or client is given
            max_workers: Thread pool size for batch queries
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.rpc = rpc or CasperRpcClient(NetworkConfig.get_node_url(network, node_url), logger=self.logger)
        self.max_workers = max_workers

    def get_state_root_hash(self) -> str:
        return self.rpc.get_state_root_hash()

    def get_latest_block_hash(self) -> str:
        return self.rpc.get_latest_block_hash()

    def get_current_era_id(self) -> int:
        return self.rpc.get_current_era_id()

    def put_deploy(self, deploy_json: Mapping[str, Any]) -> str:
        """
        Broadcast a deploy given in JSON form

        Raises:
            ConfigurationError: If the deploy's hashes or signatures do not check out
        """
        deploy = deploy_from_json(deploy_json)
        if not is_valid_deploy(deploy):
            raise ConfigurationError(f"Invalid deploy {deploy_hash_hex(deploy)}: hash or approval mismatch")
        return self.rpc.put_deploy(deploy)

    def get_deploy_result_json(self, deploy_hash: str) -> Dict[str, Any]:
        """Raw `info_get_deploy` result: the deploy and its execution results"""
        return self.rpc.get_deploy(deploy_hash)

    def get_deploy_json(self, deploy_hash: str) -> Dict[str, Any]:
        """The deploy itself, wrapped as {"deploy": ...}"""
        return {"deploy": self.rpc.get_deploy(deploy_hash)["deploy"]}

    def _get_deploy_info(self, deploy_hash: str) -> DeployInfo:
        try:
            return DeployInfo.model_validate(self.get_deploy_result_json(deploy_hash))
        except (CasperDashError, ValidationError) as e:
            rate_limited_log(f"Deploy lookup failed for {deploy_hash}: {e}", logger_instance=self.logger)
            return DeployInfo(deploy={"hash": deploy_hash}, execution_results=[], indeterminate=True)

    def get_deploys_result(self, deploy_hashes: Union[str, Sequence[str]]) -> List[DeployInfo]:
        """
        Look up several deploys concurrently

        A failed lookup yields a placeholder flagged `indeterminate` instead
        of failing the batch.
        """
        hashes = [deploy_hashes] if isinstance(deploy_hashes, str) else list(deploy_hashes)
        if not hashes:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self._get_deploy_info, hashes))

    def get_deploys_status(self, deploy_hashes: Union[str, Sequence[str]]) -> List[DeployStatusEntry]:
        return [
            DeployStatusEntry(hash=info.hash, status=info.status)
            for info in self.get_deploys_result(deploy_hashes)
        ]

    def get_state_value(self, state_root_hash: str, state_key: str, state_path: Sequence[str] = ()) -> Dict[str, Any]:
        """Raw stored value under a global-state key"""
        return self.rpc.get_state_item(state_root_hash, state_key, list(state_path))

    def get_state_key_value(self, state_root_hash: str, state_key: str, state_path: str) -> Any:
        """Native value of the CLValue stored at `state_key` / `state_path`"""
        stored = self.get_state_value(state_root_hash, state_key, [state_path])
        return cl_to_native(stored_cl_value(stored))

    def get_state_keys_value(
        self,
        state_root_hash: str,
        state_key: str,
        state_paths: Sequence[str],
    ) -> Dict[str, Any]:
        def fetch(path: str) -> Any:
            return self.get_state_key_value(state_root_hash, state_key, path)

        paths = list(state_paths)
        if not paths:
            return {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return dict(zip(paths, executor.map(fetch, paths)))

    @staticmethod
    def create_recipient_address(public_key: PublicKey) -> CLV_Key:
        """Account-hash Key of `public_key`"""
        return CLValueBuilder.key(public_key)

    def get_account_hash_base64(self, public_key: PublicKey) -> str:
        key = self.create_recipient_address(public_key)
        return base64.b64encode(pycspr.to_bytes(key)).decode("ascii")

    def dictionary_value_getter(
        self,
        state_root_hash: str,
        dictionary_item_key: str,
        seed_uref: str,
    ) -> Any:
        """
        Read a dictionary item by seed URef

        Returns:
            The item's native value, or None if the lookup failed
        """
        try:
            stored = self.rpc.get_dictionary_item_by_uref(state_root_hash, dictionary_item_key, seed_uref)
            return cl_to_native(stored_cl_value(stored))
        except (CasperDashError, ValueError) as e:
            self.logger.error(f"Dictionary lookup {dictionary_item_key} under {seed_uref} failed: {e}")
            return None
