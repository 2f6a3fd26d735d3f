"""
Generic contract client: deploy builders and contract state queries.
"""
from typing import Any, List, Mapping, Optional, Sequence, Union

from pycspr.types.cl import CLV_Key, CLV_Value

from ..casper.cl_values import CLValueBuilder, RuntimeArgs, cl_value_from_json
from ..casper.deploy import (
    DEFAULT_TTL,
    Amount,
    Deploy,
    make_deploy,
    new_module_bytes,
    new_stored_contract_by_hash,
    sign_deploy,
    standard_payment,
)
from ..casper.keys import KeyPair, PublicKey
from ..casper.rpc import CasperRpcClient
from ..exceptions import ConfigurationError, RpcError
from ..utils import convert_hash_str_to_bytes, strip_hash_prefix


def stored_cl_value(stored_value: Mapping[str, Any]) -> CLV_Value:
    """
    Decode the CLValue member of a global-state stored value

    Raises:
        RpcError: If the stored value does not hold a CLValue
    """
    if "CLValue" not in stored_value:
        kinds = ", ".join(stored_value) or "nothing"
        raise RpcError(f"Stored value is not a CLValue (got {kinds})")
    return cl_value_from_json(stored_value["CLValue"])


class Contract:
    """
    A deployed (or to-be-installed) contract.

    Builders return unsent `Deploy` values and perform no network I/O.
    Queries need an RPC client.
    """

    def __init__(
        self,
        contract_hash: Optional[str] = None,
        contract_package_hash: Optional[str] = None,
        rpc: Optional[CasperRpcClient] = None,
    ):
        self.contract_hash: Optional[str] = None
        self.contract_package_hash: Optional[str] = None
        self.rpc = rpc
        if contract_hash:
            self.set_contract_hash(contract_hash, contract_package_hash)
        elif contract_package_hash:
            self.contract_package_hash = strip_hash_prefix(contract_package_hash)

    def set_contract_hash(self, contract_hash: str, contract_package_hash: Optional[str] = None) -> None:
        """Point the client at a contract; hashes are stored as bare hex"""
        convert_hash_str_to_bytes(contract_hash)
        self.contract_hash = strip_hash_prefix(contract_hash)
        if contract_package_hash:
            self.contract_package_hash = strip_hash_prefix(contract_package_hash)

    def _require_contract_hash(self) -> str:
        if not self.contract_hash:
            raise ConfigurationError("You need to set contract hash before calling the contract")
        return self.contract_hash

    @property
    def contract_hash_key(self) -> CLV_Value:
        """The contract hash as a Key value (for `nft_contract_hash` style args)"""
        return CLValueBuilder.key(convert_hash_str_to_bytes(self._require_contract_hash()))

    def call_entrypoint(
        self,
        entry_point: str,
        args: RuntimeArgs,
        sender: PublicKey,
        chain_name: str,
        payment_amount: Amount,
        signing_keys: Optional[Sequence[KeyPair]] = None,
        ttl: str = DEFAULT_TTL,
    ) -> Deploy:
        """
        Build a deploy calling an entry point of this contract

        Args:
            entry_point: Entry point name
            args: Runtime arguments
            sender: Public key of the deploy sender
            chain_name: Network name
            payment_amount: Payment in motes (int or numeric string)
            signing_keys: Keys to sign with; the deploy is left unsigned when empty
            ttl: Humanized time to live, e.g. "30m"

        Raises:
            ConfigurationError: If no contract hash is set
        """
        session = new_stored_contract_by_hash(
            convert_hash_str_to_bytes(self._require_contract_hash()), entry_point, args
        )
        deploy = make_deploy(sender, chain_name, session, standard_payment(payment_amount), ttl=ttl)
        return sign_deploy(deploy, signing_keys)

    def call_session_wasm(
        self,
        wasm: Optional[bytes],
        args: RuntimeArgs,
        payment_amount: Amount,
        sender: PublicKey,
        chain_name: str,
        signing_keys: Optional[Sequence[KeyPair]] = None,
        ttl: str = DEFAULT_TTL,
    ) -> Deploy:
        """
        Build a deploy running session code with the given arguments

        Raises:
            ConfigurationError: If wasm is missing or empty
        """
        if not wasm:
            raise ConfigurationError("You need to provide wasm")
        deploy = make_deploy(
            sender, chain_name, new_module_bytes(wasm, args), standard_payment(payment_amount), ttl=ttl
        )
        return sign_deploy(deploy, signing_keys)

    def _require_rpc(self) -> CasperRpcClient:
        if self.rpc is None:
            raise ConfigurationError("An RPC client is required for contract queries")
        return self.rpc

    def query_contract_data(self, path: Union[str, List[str]], state_root_hash: Optional[str] = None) -> CLV_Value:
        """
        Read a named key of this contract from global state

        Args:
            path: Named key, or a path of named keys
            state_root_hash: State root to read at (defaults to latest)
        """
        rpc = self._require_rpc()
        if isinstance(path, str):
            path = [path]
        state_root_hash = state_root_hash or rpc.get_state_root_hash()
        stored = rpc.get_state_item(state_root_hash, f"hash-{self._require_contract_hash()}", path)
        return stored_cl_value(stored)

    def query_contract_dictionary(
        self,
        dictionary_name: str,
        dictionary_item_key: str,
        state_root_hash: Optional[str] = None,
    ) -> CLV_Value:
        """Read one item of a dictionary stored under this contract's named keys"""
        rpc = self._require_rpc()
        state_root_hash = state_root_hash or rpc.get_state_root_hash()
        stored = rpc.get_dictionary_item_by_name(
            state_root_hash,
            f"hash-{self._require_contract_hash()}",
            dictionary_name,
            dictionary_item_key,
        )
        return stored_cl_value(stored)
