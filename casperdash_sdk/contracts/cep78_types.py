"""
CEP-78 install-time modes and call arguments.

Enum values are the integers the contract expects.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional, Union

from ..casper.cl_values import KeyParameter
from ..models import NFTMetadataKind

TokenId = Union[int, str]


class NFTOwnershipMode(IntEnum):
    MINTER = 0
    ASSIGNED = 1
    TRANSFERABLE = 2


class NFTKind(IntEnum):
    PHYSICAL = 0
    DIGITAL = 1
    VIRTUAL = 2


class NFTIdentifierMode(IntEnum):
    ORDINAL = 0
    HASH = 1


class MetadataMutability(IntEnum):
    IMMUTABLE = 0
    MUTABLE = 1


class MintingMode(IntEnum):
    INSTALLER = 0
    PUBLIC = 1
    ACL = 2


class WhitelistMode(IntEnum):
    UNLOCKED = 0
    LOCKED = 1


class NFTHolderMode(IntEnum):
    ACCOUNTS = 0
    CONTRACTS = 1
    MIXED = 2


class BurnMode(IntEnum):
    BURNABLE = 0
    NON_BURNABLE = 1


class OwnerReverseLookupMode(IntEnum):
    NO_LOOKUP = 0
    COMPLETE = 1
    TRANSFERS_ONLY = 2


class NamedKeyConventionMode(IntEnum):
    DERIVED_FROM_COLLECTION_NAME = 0
    V1_0_STANDARD = 1
    V1_0_CUSTOM = 2


class EventsMode(IntEnum):
    NO_EVENTS = 0
    CEP47 = 1
    CES = 2


@dataclass
class CEP78InstallArgs:
    """
    CEP-78 installation arguments.

    Optional fields are only sent when set. `access_key_name` and
    `hash_key_name` are required with `NamedKeyConventionMode.V1_0_CUSTOM`.
    """
    collection_name: str
    collection_symbol: str
    total_token_supply: Union[int, str]
    ownership_mode: NFTOwnershipMode
    nft_kind: NFTKind
    nft_metadata_kind: NFTMetadataKind
    identifier_mode: NFTIdentifierMode
    metadata_mutability: MetadataMutability
    json_schema: Optional[Any] = None
    minting_mode: Optional[MintingMode] = None
    allow_minting: Optional[bool] = None
    whitelist_mode: Optional[WhitelistMode] = None
    holder_mode: Optional[NFTHolderMode] = None
    contract_whitelist: Optional[List[str]] = None
    burn_mode: Optional[BurnMode] = None
    owner_reverse_lookup_mode: Optional[OwnerReverseLookupMode] = None
    named_key_convention: Optional[NamedKeyConventionMode] = None
    access_key_name: Optional[str] = None
    hash_key_name: Optional[str] = None
    events_mode: Optional[EventsMode] = None


@dataclass
class ConfigurableVariables:
    allow_minting: Optional[bool] = None
    contract_whitelist: Optional[List[str]] = None


@dataclass
class CallConfig:
    """Whether a call goes through session code instead of the entry point"""
    use_session_code: Optional[bool] = None


@dataclass
class MintArgs:
    owner: KeyParameter
    meta: Any
    collection_name: Optional[str] = None


@dataclass
class TransferArgs:
    source: KeyParameter
    target: KeyParameter
    token_id: Optional[TokenId] = None
    token_hash: Optional[str] = None


@dataclass
class TokenArgs:
    """Identifies a token by ordinal id or by hash, per the collection's identifier mode"""
    token_id: Optional[TokenId] = None
    token_hash: Optional[str] = None


@dataclass
class ApproveArgs:
    operator: KeyParameter
    token_id: Optional[TokenId] = None
    token_hash: Optional[str] = None


@dataclass
class ApproveAllArgs:
    token_owner: KeyParameter
    approve_all: bool
    operator: KeyParameter


@dataclass
class RegisterArgs:
    token_owner: KeyParameter


@dataclass
class TokenMetadataArgs:
    token_meta_data: Any
    token_id: Optional[TokenId] = None
    token_hash: Optional[str] = None


@dataclass
class StoreBalanceOfArgs:
    token_owner: KeyParameter
    key_name: str


@dataclass
class StoreTokenArgs:
    """Arguments of the `store_get_approved` / `store_owner_of` session calls"""
    key_name: str
    token_id: Optional[TokenId] = None
    token_hash: Optional[str] = None


@dataclass
class MigrateArgs:
    collection_name: str
