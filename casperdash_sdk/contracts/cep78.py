"""
CEP-78 (enhanced NFT) contract client.
"""
import json
from typing import Any, Optional, Sequence

from pycspr.types.cl import CLV_List

from ..casper.cl_values import CLValueBuilder, RuntimeArgs
from ..casper.deploy import Amount, Deploy
from ..casper.keys import KeyPair, PublicKey
from ..casper.rpc import CasperRpcClient
from ..exceptions import ConfigurationError
from ..utils import convert_hash_str_to_bytes
from .base import Contract
from .cep78_types import (
    ApproveAllArgs,
    ApproveArgs,
    CallConfig,
    CEP78InstallArgs,
    ConfigurableVariables,
    MetadataMutability,
    MigrateArgs,
    MintArgs,
    NamedKeyConventionMode,
    NFTIdentifierMode,
    RegisterArgs,
    StoreBalanceOfArgs,
    StoreTokenArgs,
    TokenArgs,
    TokenMetadataArgs,
    TransferArgs,
)

CONFLICTING_ARGUMENTS = "Conflicting arguments provided"


def build_hash_list(hashes: Sequence[str]) -> CLV_List:
    """List of 32-byte contract hashes ("hash-" prefix allowed)"""
    return CLValueBuilder.list([CLValueBuilder.byte_array(convert_hash_str_to_bytes(h)) for h in hashes])


def _as_json_string(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def _insert_token_ref(
    runtime_args: RuntimeArgs,
    token_id: Optional[Any],
    token_hash: Optional[str],
    with_mode_flag: bool = False,
) -> None:
    if token_id is not None and token_hash is not None:
        raise ConfigurationError("Provide either token_id or token_hash, not both")
    if token_id is not None:
        if with_mode_flag:
            runtime_args["is_hash_identifier_mode"] = CLValueBuilder.bool(False)
        runtime_args["token_id"] = CLValueBuilder.u64(token_id)
    if token_hash is not None:
        if with_mode_flag:
            runtime_args["is_hash_identifier_mode"] = CLValueBuilder.bool(True)
        runtime_args["token_hash"] = CLValueBuilder.string(token_hash)


def _check_session_config(config: Optional[CallConfig], wasm: Optional[bytes]) -> bool:
    """Return whether the call runs as session code"""
    use_session_code = config.use_session_code if config else None
    if use_session_code is False and wasm:
        raise ConfigurationError(CONFLICTING_ARGUMENTS)
    if use_session_code and not wasm:
        raise ConfigurationError("Missing wasm argument")
    return bool(use_session_code)


class CEP78Contract(Contract):
    """Builds deploys for CEP-78 entry points and its session-code helpers."""

    def __init__(
        self,
        network_name: str,
        contract_hash: Optional[str] = None,
        contract_package_hash: Optional[str] = None,
        rpc: Optional[CasperRpcClient] = None,
    ):
        super().__init__(contract_hash, contract_package_hash, rpc)
        self.network_name = network_name

    def _entry_point(self, entry_point, runtime_args, payment_amount, sender, signing_keys) -> Deploy:
        return self.call_entrypoint(
            entry_point, runtime_args, sender, self.network_name, payment_amount, signing_keys
        )

    def _session(self, wasm, runtime_args, payment_amount, sender, signing_keys) -> Deploy:
        return self.call_session_wasm(
            wasm, runtime_args, payment_amount, sender, self.network_name, signing_keys
        )

    def install(
        self,
        args: CEP78InstallArgs,
        payment_amount: Amount,
        sender: PublicKey,
        wasm: Optional[bytes],
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """
        Install a CEP-78 collection

        Raises:
            ConfigurationError: If wasm is missing, if hash identifiers are
                combined with mutable metadata, or if the custom named-key
                convention lacks its key names
        """
        if not wasm:
            raise ConfigurationError("You need to provide wasm")
        if (
            args.identifier_mode == NFTIdentifierMode.HASH
            and args.metadata_mutability == MetadataMutability.MUTABLE
        ):
            raise ConfigurationError(
                "You can't combine NFTIdentifierMode.HASH and MetadataMutability.MUTABLE"
            )

        runtime_args = {
            "collection_name": CLValueBuilder.string(args.collection_name),
            "collection_symbol": CLValueBuilder.string(args.collection_symbol),
            "total_token_supply": CLValueBuilder.u64(args.total_token_supply),
            "ownership_mode": CLValueBuilder.u8(args.ownership_mode),
            "nft_kind": CLValueBuilder.u8(args.nft_kind),
            "nft_metadata_kind": CLValueBuilder.u8(args.nft_metadata_kind),
            "identifier_mode": CLValueBuilder.u8(args.identifier_mode),
            "metadata_mutability": CLValueBuilder.u8(args.metadata_mutability),
        }

        if args.json_schema is not None:
            runtime_args["json_schema"] = CLValueBuilder.string(_as_json_string(args.json_schema))
        if args.minting_mode is not None:
            runtime_args["minting_mode"] = CLValueBuilder.u8(args.minting_mode)
        if args.allow_minting is not None:
            runtime_args["allow_minting"] = CLValueBuilder.bool(args.allow_minting)
        if args.whitelist_mode is not None:
            runtime_args["whitelist_mode"] = CLValueBuilder.u8(args.whitelist_mode)
        if args.holder_mode is not None:
            runtime_args["holder_mode"] = CLValueBuilder.u8(args.holder_mode)
        if args.contract_whitelist:
            runtime_args["contract_whitelist"] = build_hash_list(args.contract_whitelist)
        if args.burn_mode is not None:
            runtime_args["burn_mode"] = CLValueBuilder.u8(args.burn_mode)
        if args.owner_reverse_lookup_mode is not None:
            runtime_args["owner_reverse_lookup_mode"] = CLValueBuilder.u8(args.owner_reverse_lookup_mode)
        if args.named_key_convention is not None:
            runtime_args["named_key_convention"] = CLValueBuilder.u8(args.named_key_convention)

        if args.named_key_convention == NamedKeyConventionMode.V1_0_CUSTOM:
            if not args.access_key_name or not args.hash_key_name:
                raise ConfigurationError(
                    "You need to provide 'access_key_name' and 'hash_key_name' "
                    "with NamedKeyConventionMode.V1_0_CUSTOM"
                )
            runtime_args["access_key_name"] = CLValueBuilder.string(args.access_key_name)
            runtime_args["hash_key_name"] = CLValueBuilder.string(args.hash_key_name)

        if args.events_mode is not None:
            runtime_args["events_mode"] = CLValueBuilder.u8(args.events_mode)

        return self._session(wasm, runtime_args, payment_amount, sender, signing_keys)

    def set_variables(
        self,
        args: ConfigurableVariables,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        runtime_args = {}
        if args.allow_minting is not None:
            runtime_args["allow_minting"] = CLValueBuilder.bool(args.allow_minting)
        if args.contract_whitelist:
            runtime_args["contract_whitelist"] = build_hash_list(args.contract_whitelist)
        return self._entry_point("set_variables", runtime_args, payment_amount, sender, signing_keys)

    def register(
        self,
        args: RegisterArgs,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Register an owner (needed by reverse-lookup collections before minting or receiving)"""
        runtime_args = {"token_owner": CLValueBuilder.key(args.token_owner)}
        return self._entry_point("register_owner", runtime_args, payment_amount, sender, signing_keys)

    def revoke(
        self,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        return self._entry_point("revoke", {}, payment_amount, sender, signing_keys)

    def mint(
        self,
        args: MintArgs,
        config: Optional[CallConfig],
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
        wasm: Optional[bytes] = None,
    ) -> Deploy:
        """
        Mint a token, through the entry point or through session code

        Raises:
            ConfigurationError: On conflicting session settings, or when session
                code is requested without wasm or collection name
        """
        use_session_code = _check_session_config(config, wasm)
        runtime_args = {
            "token_owner": CLValueBuilder.key(args.owner),
            "token_meta_data": CLValueBuilder.string(_as_json_string(args.meta)),
        }

        if use_session_code:
            if not args.collection_name:
                raise ConfigurationError("Missing collection_name argument")
            runtime_args["nft_contract_hash"] = self.contract_hash_key
            runtime_args["collection_name"] = CLValueBuilder.string(args.collection_name)
            return self._session(wasm, runtime_args, payment_amount, sender, signing_keys)

        return self._entry_point("mint", runtime_args, payment_amount, sender, signing_keys)

    def burn(
        self,
        args: TokenArgs,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        runtime_args = {}
        _insert_token_ref(runtime_args, args.token_id, args.token_hash)
        return self._entry_point("burn", runtime_args, payment_amount, sender, signing_keys)

    def transfer(
        self,
        args: TransferArgs,
        config: Optional[CallConfig],
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
        wasm: Optional[bytes] = None,
    ) -> Deploy:
        """Transfer a token from `source` to `target`"""
        use_session_code = _check_session_config(config, wasm)
        runtime_args = {
            "target_key": CLValueBuilder.key(args.target),
            "source_key": CLValueBuilder.key(args.source),
        }
        _insert_token_ref(runtime_args, args.token_id, args.token_hash, with_mode_flag=True)

        if use_session_code:
            runtime_args["nft_contract_hash"] = self.contract_hash_key
            return self._session(wasm, runtime_args, payment_amount, sender, signing_keys)

        return self._entry_point("transfer", runtime_args, payment_amount, sender, signing_keys)

    def set_token_metadata(
        self,
        args: TokenMetadataArgs,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        runtime_args = {
            "token_meta_data": CLValueBuilder.string(_as_json_string(args.token_meta_data)),
        }
        _insert_token_ref(runtime_args, args.token_id, args.token_hash)
        return self._entry_point("set_token_metadata", runtime_args, payment_amount, sender, signing_keys)

    def approve(
        self,
        args: ApproveArgs,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Let `operator` transfer one token"""
        runtime_args = {"operator": CLValueBuilder.key(args.operator)}
        _insert_token_ref(runtime_args, args.token_id, args.token_hash)
        return self._entry_point("approve", runtime_args, payment_amount, sender, signing_keys)

    def approve_all(
        self,
        args: ApproveAllArgs,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        runtime_args = {
            "token_owner": CLValueBuilder.key(args.token_owner),
            "approve_all": CLValueBuilder.bool(args.approve_all),
            "operator": CLValueBuilder.key(args.operator),
        }
        return self._entry_point("set_approval_for_all", runtime_args, payment_amount, sender, signing_keys)

    def store_balance_of(
        self,
        args: StoreBalanceOfArgs,
        payment_amount: Amount,
        sender: PublicKey,
        wasm: Optional[bytes],
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Session call storing the owner's balance under `key_name` in the caller's account"""
        if not wasm:
            raise ConfigurationError("You need to provide wasm")
        runtime_args = {
            "nft_contract_hash": self.contract_hash_key,
            "token_owner": CLValueBuilder.key(args.token_owner),
            "key_name": CLValueBuilder.string(args.key_name),
        }
        return self._session(wasm, runtime_args, payment_amount, sender, signing_keys)

    def _store_token_query(self, args, payment_amount, sender, wasm, signing_keys) -> Deploy:
        if not wasm:
            raise ConfigurationError("You need to provide wasm")
        runtime_args = {
            "nft_contract_hash": self.contract_hash_key,
            "key_name": CLValueBuilder.string(args.key_name),
        }
        _insert_token_ref(runtime_args, args.token_id, args.token_hash, with_mode_flag=True)
        return self._session(wasm, runtime_args, payment_amount, sender, signing_keys)

    def store_get_approved(
        self,
        args: StoreTokenArgs,
        payment_amount: Amount,
        sender: PublicKey,
        wasm: Optional[bytes],
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        return self._store_token_query(args, payment_amount, sender, wasm, signing_keys)

    def store_owner_of(
        self,
        args: StoreTokenArgs,
        payment_amount: Amount,
        sender: PublicKey,
        wasm: Optional[bytes],
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        return self._store_token_query(args, payment_amount, sender, wasm, signing_keys)

    def migrate(
        self,
        args: MigrateArgs,
        payment_amount: Amount,
        sender: PublicKey,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        runtime_args = {
            "collection_name": CLValueBuilder.string(args.collection_name),
        }
        return self._entry_point("migrate", runtime_args, payment_amount, sender, signing_keys)
