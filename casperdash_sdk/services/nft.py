"""
NFT collection queries for CEP-47 and CEP-78 contracts.

Every lookup is a dictionary or named-key read against the collection
contract. Lookups for one token run concurrently; a lookup that fails is
logged and left out of the record instead of failing the whole query.
"""
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import requests
from pycspr.types.cl import CLV_Key

from .._rate_limited_log import rate_limited_log
from ..casper.keys import PublicKey, public_key_to_hex
from ..casper.rpc import CasperRpcClient
from ..config import DEFAULT_NETWORK
from ..contracts.base import Contract
from ..exceptions import CasperDashError, MetadataError
from ..models import (
    AttributeConfig,
    NFTConfig,
    NFTDetails,
    NFTMetadataKind,
    NFTStandard,
    TokenAttribute,
)
from ..utils import account_hash_hex, cl_to_native, owned_token_index_key
from .casper import DEFAULT_MAX_WORKERS, CasperServices

logger = logging.getLogger(__name__)

METADATA_NAMED_KEY = "metadata"
BALANCES_NAMED_KEY = "balances"
OWNED_TOKENS_BY_INDEX_NAMED_KEY = "owned_tokens_by_index"
OWNED_TOKENS_NAMED_KEY = "owned_tokens"
OWNER_OUTPUT_KEY = "ownerAccountHash"

# (contract named key, output key)
CEP47_INFO_NAMED_KEYS = (
    ("symbol", "symbol"),
    ("name", "name"),
    ("total_supply", "totalSupply"),
)
CEP78_INFO_NAMED_KEYS = (
    ("collection_symbol", "symbol"),
    ("collection_name", "name"),
    ("total_token_supply", "totalSupply"),
)

METADATA_NAMED_KEYS = {
    NFTMetadataKind.CEP78: "metadata_cep78",
    NFTMetadataKind.NFT721: "metadata_nft721",
    NFTMetadataKind.RAW: "metadata_raw",
    NFTMetadataKind.CUSTOM_VALIDATED: "metadata_custom_validated",
}

_MISSING = object()


def metadata_named_key(cep: NFTStandard, metadata_kind: Optional[NFTMetadataKind] = None) -> str:
    """Dictionary holding token metadata for the given standard and metadata kind"""
    if cep == NFTStandard.CEP47 or metadata_kind is None:
        return METADATA_NAMED_KEY
    return METADATA_NAMED_KEYS[NFTMetadataKind(metadata_kind)]


def owner_named_key(cep: NFTStandard) -> str:
    return "owners" if cep == NFTStandard.CEP47 else "token_owners"


def format_owner(value: Any) -> str:
    """Render an owner Key (or raw account hash) as "account-hash-<hex>"."""
    if isinstance(value, CLV_Key):
        value = value.identifier
    return f"account-hash-{bytes(value).hex()}"


@dataclass(frozen=True)
class TokenLookup:
    """One dictionary read contributing `output_key` to an NFT record"""
    named_key: str
    output_key: str
    transform: Optional[Callable[[Any], Any]] = None


class NFTServices:
    """
    Read-only view of one NFT collection.

    Example:
        >>> config = NFTConfig(contract_hash="hash-...", name="Casper Punks")
        >>> nfts = NFTServices("http://localhost:7777/rpc", config)
        >>> nfts.get_nft_details("1")
    """

    def __init__(
        self,
        node_url: Optional[str] = None,
        config: Optional[NFTConfig] = None,
        rpc: Optional[CasperRpcClient] = None,
        network: str = DEFAULT_NETWORK,
        max_workers: int = DEFAULT_MAX_WORKERS,
        session: Optional[requests.Session] = None,
        metadata_timeout: int = 30,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the service

        Args:
            node_url: Node RPC URL (defaults to the network's node)
            config: Collection configuration
            rpc: Existing RPC client to reuse instead of `node_url`
            network: Network name used when no URL or client is given
            max_workers: Thread pool size for concurrent lookups
            session: HTTP session used to fetch metadata URIs
            metadata_timeout: Timeout in seconds for metadata URI requests
            logger: Optional logger instance
        """
        if config is None:
            raise ValueError("An NFTConfig is required")
        self.logger = logger or logging.getLogger(__name__)
        self.config = config
        self.casper_services = CasperServices(node_url, rpc, network, max_workers, self.logger)
        self.rpc = self.casper_services.rpc
        self.contract = Contract(config.contract_hash, rpc=self.rpc)
        self.nft_contract_hash = self.contract.contract_hash
        self.max_workers = max_workers
        self.session = session or requests.Session()
        self.metadata_timeout = metadata_timeout
        self.info_named_keys = CEP47_INFO_NAMED_KEYS if config.cep == NFTStandard.CEP47 else CEP78_INFO_NAMED_KEYS

    @property
    def attribute_configs(self) -> List[AttributeConfig]:
        metadata = self.config.named_keys.metadata
        return list(metadata.attributes) if metadata else []

    def _query_dictionary(self, named_key: str, item_key: str) -> Any:
        return cl_to_native(self.contract.query_contract_dictionary(named_key, item_key))

    # -- ownership ----------------------------------------------------------

    def balance_of(self, public_key: PublicKey) -> int:
        """Number of tokens held by `public_key`"""
        return int(self._query_dictionary(BALANCES_NAMED_KEY, account_hash_hex(public_key)))

    def get_token_ids_by_public_key(self, public_key: PublicKey) -> List[str]:
        """
        Token ids held by `public_key`

        Returns:
            Token ids in owner-index order, or an empty list if any lookup fails
        """
        try:
            if self.config.cep == NFTStandard.CEP47:
                balance = self.balance_of(public_key)

                def token_at(index: int) -> str:
                    item_key = owned_token_index_key(public_key, index)
                    return str(self._query_dictionary(OWNED_TOKENS_BY_INDEX_NAMED_KEY, item_key))

                with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                    return list(executor.map(token_at, range(balance)))

            owned = self._query_dictionary(OWNED_TOKENS_NAMED_KEY, account_hash_hex(public_key))
            return [str(token_id) for token_id in owned or []]
        except (CasperDashError, TypeError, ValueError) as e:
            rate_limited_log(
                f"Token ids of {public_key_to_hex(public_key)} unavailable: {e}",
                level="error",
                logger_instance=self.logger,
            )
            return []

    # -- metadata -----------------------------------------------------------

    @staticmethod
    def get_attribute_config(
        attribute_configs: Sequence[AttributeConfig],
        key: str,
        value: Any,
    ) -> TokenAttribute:
        """Present one metadata attribute using its config, if any"""
        conf = next((c for c in attribute_configs or [] if c.key == key), None)
        if conf is None:
            return TokenAttribute(key=key, name=key, value=value)
        return TokenAttribute(
            key=conf.strict_key or key,
            name=conf.name,
            value=conf.transform(value) if conf.transform else value,
        )

    @classmethod
    def get_object_attribute_value_config(
        cls,
        attribute_configs: Sequence[AttributeConfig],
        data: Mapping[str, Any],
    ) -> List[TokenAttribute]:
        return [cls.get_attribute_config(attribute_configs, key, value) for key, value in data.items()]

    def massage_metadata(self, detail: Any) -> List[TokenAttribute]:
        """
        Turn a raw metadata value into attributes

        A list of (key, value) pairs is mapped directly; anything else is
        decoded as a JSON object. Undecodable metadata yields an empty list.
        """
        attribute_configs = self.attribute_configs
        try:
            if isinstance(detail, list):
                for item in detail:
                    if not isinstance(item, (list, tuple)) or len(item) != 2:
                        raise ValueError(f"expected (key, value) pairs, got {item!r}")
                data = {str(k): v for k, v in detail}
            else:
                data = json.loads(detail) if isinstance(detail, (str, bytes)) else detail
            if not isinstance(data, Mapping):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        except (TypeError, ValueError) as e:
            rate_limited_log(f"Unreadable metadata: {e}", level="error", logger_instance=self.logger)
            return []
        return self.get_object_attribute_value_config(attribute_configs, data)

    def fetch_metadata_uri(self, uri: str) -> Any:
        """Fetch a metadata document and decode its JSON body"""
        try:
            response = self.session.get(uri, timeout=self.metadata_timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise MetadataError(f"Failed to fetch metadata from {uri}: {e}") from e
        except ValueError as e:
            raise MetadataError(f"Metadata at {uri} is not JSON: {e}") from e

    def get_metadata_from_uri(self, metadata: Sequence[TokenAttribute]) -> Any:
        """
        Resolve metadata stored behind the configured URI attribute

        Raises:
            MetadataError: If no URI attribute is configured or present
        """
        metadata_config = self.config.named_keys.metadata
        uri_config = metadata_config.uri if metadata_config else None
        if uri_config is None:
            raise MetadataError("No metadata URI attribute configured")
        uri = next((attr for attr in metadata if attr.key == uri_config.key), None)
        if uri is None:
            raise MetadataError(f"Metadata has no '{uri_config.key}' attribute")
        transform = uri_config.transform or self.fetch_metadata_uri
        return transform(uri.value)

    # -- records ------------------------------------------------------------

    def token_lookups(self) -> List[TokenLookup]:
        """Dictionary reads that make up an NFT record"""
        lookups = [
            TokenLookup(metadata_named_key(self.config.cep, self.config.metadata_kind), METADATA_NAMED_KEY),
            TokenLookup(owner_named_key(self.config.cep), OWNER_OUTPUT_KEY, format_owner),
        ]
        for extra in self.config.named_keys.extra:
            if extra.named_key != METADATA_NAMED_KEY:
                lookups.append(TokenLookup(extra.named_key, extra.output_key, extra.transform))
        return lookups

    def _lookup(self, lookup: TokenLookup, token_id: str) -> Any:
        try:
            value = self._query_dictionary(lookup.named_key, token_id)
            return lookup.transform(value) if lookup.transform else value
        except Exception as e:
            rate_limited_log(
                f"Lookup {lookup.named_key}[{token_id}] of {self.nft_contract_hash} failed: {e}",
                logger_instance=self.logger,
            )
            return _MISSING

    def get_nft_details(self, token_id: Union[int, str]) -> NFTDetails:
        """
        Build the record of one token

        Failed lookups are omitted, so the record may be partial.

        Raises:
            MetadataError: If metadata lives behind a URI that cannot be resolved
        """
        token_id = str(token_id)
        lookups = self.token_lookups()
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            values = list(executor.map(lambda lookup: self._lookup(lookup, token_id), lookups))

        record: Dict[str, Any] = {
            "tokenId": token_id,
            "contractName": self.config.name,
            "contractAddress": self.nft_contract_hash,
            "creator": self.config.creator,
            "metadata": [],
            "action": self.config.action,
        }
        for lookup, value in zip(lookups, values):
            if value is _MISSING:
                continue
            if lookup.output_key == METADATA_NAMED_KEY:
                value = self.massage_metadata(value)
            record[lookup.output_key] = value

        metadata_config = self.config.named_keys.metadata
        if metadata_config and metadata_config.is_from_uri:
            record["metadata"] = self.get_metadata_from_uri(record["metadata"])
        return NFTDetails.model_validate(record)

    def get_my_nft_detail(self, token_id: Union[int, str]) -> NFTDetails:
        return self.get_nft_details(token_id)

    def _token_info(self, token_id: str, contract_info: Mapping[str, Any]) -> Union[NFTDetails, Dict[str, Any]]:
        try:
            details = self.get_nft_details(token_id)
        except Exception as e:
            rate_limited_log(f"NFT {token_id} of {self.nft_contract_hash} unavailable: {e}", logger_instance=self.logger)
            return {**contract_info, "tokenId": token_id}
        return NFTDetails.model_validate({**details.model_dump(by_alias=True), **contract_info})

    def get_nft_info_by_token_id(
        self,
        token_ids: Sequence[Union[int, str]],
        contract_info: Optional[Mapping[str, Any]] = None,
    ) -> List[Union[NFTDetails, Dict[str, Any]]]:
        """
        Records of several tokens, merged with contract-level info

        A token whose record cannot be built yields a plain dict holding its
        id and the contract info.
        """
        contract_info = dict(contract_info or {})
        ids = [str(token_id) for token_id in token_ids]
        if not ids:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(lambda token_id: self._token_info(token_id, contract_info), ids))

    def get_contract_info(self) -> Dict[str, Any]:
        """Collection symbol, name and total supply; unreadable values are None"""
        def read(named_key: str) -> Any:
            try:
                return cl_to_native(self.contract.query_contract_data([named_key]))
            except (CasperDashError, ValueError) as e:
                rate_limited_log(f"Named key {named_key} unavailable: {e}", level="error", logger_instance=self.logger)
                return None

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            values = list(executor.map(read, [named_key for named_key, _ in self.info_named_keys]))
        return {output_key: value for (_, output_key), value in zip(self.info_named_keys, values)}

    def get_nft_by_public_key(
        self,
        public_key: PublicKey,
        contract_info: Optional[Mapping[str, Any]] = None,
    ) -> List[Union[NFTDetails, Dict[str, Any]]]:
        """Records of every token held by `public_key`"""
        token_ids = self.get_token_ids_by_public_key(public_key)
        return self.get_nft_info_by_token_id(token_ids, {**(contract_info or {}), "balances": len(token_ids)})
