"""
Data models for the CasperDash SDK.
"""
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class DeployStatus(str, Enum):
    """Status of a broadcast deploy as reported by the node"""
    PENDING = "pending"
    FAILED = "failed"
    COMPLETED = "completed"
    # The status lookup itself failed, so the deploy's fate is unknown
    INDETERMINATE = "indeterminate"


class FailureResult(BaseModel):
    """Failure branch of an execution result"""
    error_message: str
    cost: Optional[str] = None

    class Config:
        extra = "allow"


class ExecutionResult(BaseModel):
    """Execution result: exactly one of Success or Failure is set"""
    success: Optional[Dict[str, Any]] = Field(None, alias="Success")
    failure: Optional[FailureResult] = Field(None, alias="Failure")

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _exactly_one_branch(self):
        if (self.success is None) == (self.failure is None):
            raise ValueError("Execution result must hold exactly one of Success or Failure")
        return self

    @property
    def is_success(self) -> bool:
        return self.success is not None

    @property
    def error_message(self) -> Optional[str]:
        return self.failure.error_message if self.failure else None


class ExecutionResultEntry(BaseModel):
    """Execution result of a deploy within one block"""
    block_hash: Optional[str] = None
    result: ExecutionResult


class DeployInfo(BaseModel):
    """Result of `info_get_deploy`"""
    deploy: Dict[str, Any]
    execution_results: List[ExecutionResultEntry] = []
    api_version: Optional[str] = None
    # Set when the lookup failed and this record is a placeholder
    indeterminate: bool = False

    @property
    def hash(self) -> Optional[str]:
        return self.deploy.get("hash")

    @property
    def is_pending(self) -> bool:
        return not self.execution_results

    @property
    def failure(self) -> Optional[FailureResult]:
        for entry in self.execution_results:
            if entry.result.failure is not None:
                return entry.result.failure
        return None

    @property
    def status(self) -> DeployStatus:
        if self.indeterminate:
            return DeployStatus.INDETERMINATE
        if self.is_pending:
            return DeployStatus.PENDING
        if self.failure is not None:
            return DeployStatus.FAILED
        return DeployStatus.COMPLETED


class DeployStatusEntry(BaseModel):
    """Hash and status pair returned by status queries"""
    hash: str
    status: DeployStatus


class SpeculativeResult(BaseModel):
    """Result of `speculative_exec`"""
    execution_result: ExecutionResult
    block_hash: Optional[str] = None
    api_version: Optional[str] = None


# ---------------------------------------------------------------------------
# NFT query configuration
# ---------------------------------------------------------------------------

class NFTStandard(str, Enum):
    CEP78 = "cep-78"
    CEP47 = "cep-47"


class NFTMetadataKind(IntEnum):
    CEP78 = 0
    NFT721 = 1
    RAW = 2
    CUSTOM_VALIDATED = 3


class AttributeConfig(BaseModel):
    """
    How one metadata attribute is presented.

    Attributes:
        key: Attribute key as stored on chain
        name: Display name
        transform: Optional function applied to the raw value
        strict_key: Key to report instead of `key`
    """
    key: str
    name: str
    transform: Optional[Callable[[Any], Any]] = None
    strict_key: Optional[str] = None

    class Config:
        frozen = True


class MetadataUriConfig(BaseModel):
    """Metadata lives at a URI stored in the attribute `key`"""
    key: str
    # Defaults to fetching the URI and decoding the JSON body
    transform: Optional[Callable[[str], Any]] = None

    class Config:
        frozen = True


class MetadataConfig(BaseModel):
    attributes: List[AttributeConfig] = []
    is_from_uri: bool = False
    uri: Optional[MetadataUriConfig] = None

    class Config:
        frozen = True


class ExtraNamedKey(BaseModel):
    """An additional per-token dictionary to read into the NFT record"""
    named_key: str
    name: Optional[str] = None
    transform: Optional[Callable[[Any], Any]] = None

    class Config:
        frozen = True

    @property
    def output_key(self) -> str:
        return self.name or self.named_key


class NamedKeysConfig(BaseModel):
    metadata: Optional[MetadataConfig] = None
    extra: List[ExtraNamedKey] = []

    class Config:
        frozen = True


class NFTConfig(BaseModel):
    """
    Read-only configuration of an NFT collection for the query service.

    Attributes:
        contract_hash: Contract hash (hex, with or without "hash-" prefix)
        name: Collection display name
        cep: NFT standard of the contract
        creator: Optional creator label
        symbol: Optional collection symbol
        named_keys: Named-key resolution config
        action: Optional action label carried into every record
        metadata_kind: CEP-78 metadata kind (selects the metadata dictionary)
    """
    contract_hash: str
    name: str
    cep: NFTStandard = NFTStandard.CEP78
    creator: Optional[str] = None
    symbol: Optional[str] = None
    named_keys: NamedKeysConfig = NamedKeysConfig()
    action: Optional[str] = None
    metadata_kind: Optional[NFTMetadataKind] = None

    class Config:
        frozen = True


# ---------------------------------------------------------------------------
# NFT records
# ---------------------------------------------------------------------------

class TokenAttribute(BaseModel):
    """A resolved metadata attribute"""
    key: str
    name: str
    value: Any = None


class NFTDetails(BaseModel):
    """
    Normalized NFT record.

    Extra named keys configured on the collection and contract-level
    information merged by batch queries are kept as extra fields.
    """
    token_id: str = Field(..., alias="tokenId")
    contract_name: Optional[str] = Field(None, alias="contractName")
    contract_address: Optional[str] = Field(None, alias="contractAddress")
    creator: Optional[str] = None
    action: Optional[str] = None
    metadata: Any = []
    owner_account_hash: Optional[str] = Field(None, alias="ownerAccountHash")
    total_supply: Optional[Any] = Field(None, alias="totalSupply")

    class Config:
        populate_by_name = True
        extra = "allow"
