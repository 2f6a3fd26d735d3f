"""
CEP-47 (NFT) contract client and event parser.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from pycspr.types.cl import CLV_Map, CLV_String, CLV_Value

from ..casper.cl_values import CLValueBuilder, KeyParameter, cl_value_from_json, to_cl_map
from ..casper.deploy import Amount, Deploy
from ..casper.keys import KeyPair, PublicKey
from ..casper.rpc import CasperRpcClient
from ..utils import strip_hash_prefix
from .base import Contract

TokenId = Union[int, str]


@dataclass
class CEP47InstallArgs:
    """
    CEP-47 installation parameters.

    Attributes:
        name: Token name
        contract_name: Contract name
        symbol: Token symbol
        meta: Contract metadata
    """
    name: str
    contract_name: str
    symbol: str
    meta: Mapping[str, str]


class CEP47Events(str, Enum):
    MINT_ONE = "cep47_mint_one"
    TRANSFER_TOKEN = "cep47_transfer_token"
    BURN_ONE = "cep47_burn_one"
    METADATA_UPDATE = "cep47_metadata_update"
    APPROVE_TOKEN = "cep47_approve_token"


@dataclass
class ParsedEvent:
    name: str
    cl_value: CLV_Map


@dataclass
class ParsedEvents:
    success: bool
    data: List[ParsedEvent] = field(default_factory=list)
    error: Optional[str] = None


def _map_get(value: CLV_Map, key: str) -> Optional[Any]:
    for k, v in value.value:
        if isinstance(k, CLV_String) and k.value == key:
            return v.value
    return None


def cep47_event_parser(
    contract_package_hash: str,
    event_names: Iterable[CEP47Events],
    value: Mapping[str, Any],
) -> Optional[ParsedEvents]:
    """
    Extract CEP-47 events from a `DeployProcessed` event stream message.

    Args:
        contract_package_hash: Package hash of the emitting contract ("hash-" prefix allowed)
        event_names: Event types to keep
        value: Decoded event stream message

    Returns:
        Parsed events, or None when the deploy did not succeed
    """
    execution_result = value["body"]["DeployProcessed"]["execution_result"]
    success = execution_result.get("Success")
    if not success:
        return None

    wanted = {CEP47Events(name).value for name in event_names}
    package_hash = strip_hash_prefix(contract_package_hash).lower()
    events = []
    for entry in success["effect"]["transforms"]:
        transform = entry.get("transform")
        if not isinstance(transform, dict) or "WriteCLValue" not in transform:
            continue
        written = transform["WriteCLValue"]
        if not isinstance(written.get("parsed"), (dict, list)):
            continue
        cl_value = cl_value_from_json(written)
        if not isinstance(cl_value, CLV_Map):
            continue
        event_hash = _map_get(cl_value, "contract_package_hash")
        event_type = _map_get(cl_value, "event_type")
        if event_hash is not None and str(event_hash).lower() == package_hash and event_type in wanted:
            events.append(ParsedEvent(event_type, cl_value))

    return ParsedEvents(success=bool(events), data=events)


def _token_ids(ids: Sequence[TokenId]) -> CLV_Value:
    return CLValueBuilder.list([CLValueBuilder.u256(i) for i in ids])


class CEP47Contract(Contract):
    """Builds deploys for CEP-47 entry points."""

    def __init__(
        self,
        network_name: str,
        contract_hash: Optional[str] = None,
        contract_package_hash: Optional[str] = None,
        rpc: Optional[CasperRpcClient] = None,
    ):
        super().__init__(contract_hash, contract_package_hash, rpc)
        self.network_name = network_name

    def install(
        self,
        wasm: bytes,
        args: CEP47InstallArgs,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Install CEP-47 from its wasm"""
        runtime_args = {
            "name": CLValueBuilder.string(args.name),
            "contract_name": CLValueBuilder.string(args.contract_name),
            "symbol": CLValueBuilder.string(args.symbol),
            "meta": to_cl_map(args.meta),
        }
        return self.call_session_wasm(
            wasm, runtime_args, payment_amount, sender, self.network_name, signing_keys
        )

    def _call(self, entry_point, runtime_args, payment_amount, sender, signing_keys) -> Deploy:
        return self.call_entrypoint(
            entry_point, runtime_args, sender, self.network_name, payment_amount, signing_keys
        )

    def approve(
        self,
        spender: KeyParameter,
        ids: Sequence[TokenId],
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Give `spender` the right to transfer the given tokens"""
        runtime_args = {
            "spender": CLValueBuilder.key(spender),
            "token_ids": _token_ids(ids),
        }
        return self._call("approve", runtime_args, payment_amount, sender, signing_keys)

    def mint(
        self,
        recipient: KeyParameter,
        ids: Sequence[TokenId],
        metas: Sequence[Mapping[str, str]],
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Mint tokens for `recipient`; ids and metas are paired in order"""
        meta_values = [to_cl_map(meta) for meta in metas]
        runtime_args = {
            "recipient": CLValueBuilder.key(recipient),
            "token_ids": _token_ids(ids),
            "token_metas": CLValueBuilder.list(meta_values),
        }
        return self._call("mint", runtime_args, payment_amount, sender, signing_keys)

    def mint_copies(
        self,
        recipient: KeyParameter,
        ids: Sequence[TokenId],
        meta: Mapping[str, str],
        count: int,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Mint `count` tokens sharing the same metadata"""
        runtime_args = {
            "recipient": CLValueBuilder.key(recipient),
            "token_ids": _token_ids(ids),
            "token_meta": to_cl_map(meta),
            "count": CLValueBuilder.u32(count),
        }
        return self._call("mint_copies", runtime_args, payment_amount, sender, signing_keys)

    def burn(
        self,
        owner: KeyParameter,
        ids: Sequence[TokenId],
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        runtime_args = {
            "owner": CLValueBuilder.key(owner),
            "token_ids": _token_ids(ids),
        }
        return self._call("burn", runtime_args, payment_amount, sender, signing_keys)

    def transfer_from(
        self,
        recipient: KeyParameter,
        owner: KeyParameter,
        ids: Sequence[TokenId],
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Transfer tokens owned by `owner` to `recipient`"""
        runtime_args = {
            "recipient": CLValueBuilder.key(recipient),
            "sender": CLValueBuilder.key(owner),
            "token_ids": _token_ids(ids),
        }
        return self._call("transfer_from", runtime_args, payment_amount, sender, signing_keys)

    def transfer(
        self,
        recipient: KeyParameter,
        ids: Sequence[TokenId],
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        runtime_args = {
            "recipient": CLValueBuilder.key(recipient),
            "token_ids": _token_ids(ids),
        }
        return self._call("transfer", runtime_args, payment_amount, sender, signing_keys)

    def update_token_meta(
        self,
        token_id: TokenId,
        meta: Mapping[str, str],
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        runtime_args = {
            "token_id": CLValueBuilder.u256(token_id),
            "token_meta": to_cl_map(meta),
        }
        return self._call("update_token_meta", runtime_args, payment_amount, sender, signing_keys)
