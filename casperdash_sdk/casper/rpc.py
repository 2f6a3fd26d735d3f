"""
JSON-RPC client for a Casper node.
"""
import itertools
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions import RpcError
from .deploy import Deploy, deploy_to_json

logger = logging.getLogger(__name__)


class CasperRpcClient:
    """
    Thin JSON-RPC 2.0 client for the node's `/rpc` endpoint.

    Every method returns the `result` member of the response; error
    envelopes and transport failures raise `RpcError`.
    """

    def __init__(
        self,
        node_url: str,
        retry_count: int = 3,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the RPC client

        Args:
            node_url: Node RPC URL (e.g., "http://localhost:7777/rpc")
            retry_count: Number of retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds
            logger: Optional logger instance to use for debug logging
        """
        self.node_url = node_url
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self._ids = itertools.count(1)

        # Setup HTTP session with retries
        self.session = requests.Session()
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["POST"],
            raise_on_status=False,
            connect=retry_count,
            read=retry_count,
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

    def call(self, method: str, params: Optional[Union[Mapping[str, Any], List[Any]]] = None) -> Any:
        """
        Issue a JSON-RPC request

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            The `result` member of the response

        Raises:
            RpcError: On transport failure, invalid JSON or an error envelope
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params if params is not None else [],
        }
        self.logger.debug(f"RPC {method} -> {self.node_url}")
        try:
            response = self.session.post(self.node_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise RpcError(f"RPC request {method} failed: {e}") from e
        except ValueError as e:
            raise RpcError(f"Invalid JSON response for {method}: {e}") from e

        if "error" in body and body["error"] is not None:
            error = body["error"]
            if isinstance(error, dict):
                raise RpcError(
                    f"RPC {method} error: {error.get('message', error)}",
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RpcError(f"RPC {method} error: {error}")
        if "result" not in body:
            raise RpcError(f"RPC {method} response has no result")
        return body["result"]

    # -- chain --------------------------------------------------------------

    def get_block(self, block_hash: Optional[str] = None) -> Dict[str, Any]:
        params = {"block_identifier": {"Hash": block_hash}} if block_hash else None
        return self.call("chain_get_block", params)["block"]

    def get_state_root_hash(self, block_hash: Optional[str] = None) -> str:
        return self.get_block(block_hash)["header"]["state_root_hash"]

    def get_latest_block_hash(self) -> str:
        return self.get_block()["hash"]

    def get_current_era_id(self) -> int:
        return self.get_block()["header"]["era_id"]

    # -- deploys ------------------------------------------------------------

    def put_deploy(self, deploy: Union[Deploy, Mapping[str, Any]]) -> str:
        """
        Broadcast a deploy

        Args:
            deploy: A Deploy, its JSON form, or the JSON form wrapped as {"deploy": ...}

        Returns:
            The deploy hash as hex
        """
        return self.call("account_put_deploy", _deploy_params(deploy))["deploy_hash"]

    def get_deploy(self, deploy_hash: str) -> Dict[str, Any]:
        """Return the raw `info_get_deploy` result (deploy and execution_results)."""
        return self.call("info_get_deploy", {"deploy_hash": deploy_hash})

    def speculative_exec(self, deploy: Union[Deploy, Mapping[str, Any]]) -> Dict[str, Any]:
        return self.call("speculative_exec", _deploy_params(deploy))

    # -- global state -------------------------------------------------------

    def get_state_item(self, state_root_hash: str, key: str, path: Optional[List[str]] = None) -> Dict[str, Any]:
        result = self.call("state_get_item", {
            "state_root_hash": state_root_hash,
            "key": key,
            "path": path or [],
        })
        return result["stored_value"]

    def get_dictionary_item_by_name(
        self,
        state_root_hash: str,
        contract_hash: str,
        dictionary_name: str,
        dictionary_item_key: str,
    ) -> Dict[str, Any]:
        result = self.call("state_get_dictionary_item", {
            "state_root_hash": state_root_hash,
            "dictionary_identifier": {
                "ContractNamedKey": {
                    "key": contract_hash,
                    "dictionary_name": dictionary_name,
                    "dictionary_item_key": dictionary_item_key,
                }
            },
        })
        return result["stored_value"]

    def get_dictionary_item_by_uref(
        self,
        state_root_hash: str,
        dictionary_item_key: str,
        seed_uref: str,
    ) -> Dict[str, Any]:
        result = self.call("state_get_dictionary_item", {
            "state_root_hash": state_root_hash,
            "dictionary_identifier": {
                "URef": {
                    "seed_uref": seed_uref,
                    "dictionary_item_key": dictionary_item_key,
                }
            },
        })
        return result["stored_value"]


def _deploy_params(deploy: Union[Deploy, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(deploy, Deploy):
        return deploy_to_json(deploy)
    if "deploy" in deploy:
        return dict(deploy)
    return {"deploy": dict(deploy)}
