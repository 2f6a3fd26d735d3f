"""
CasperDash SDK: Casper contract clients, deploy orchestration and NFT queries.
"""
from .builder import BaseContract, Cep78Contract, MarketplaceContract
from .casper import (
    CasperRpcClient,
    CLValueBuilder,
    Deploy,
    KeyAlgorithm,
    KeyPair,
    PublicKey,
    RuntimeArgs,
)
from .config import NetworkConfig
from .contracts import CEP18Contract, CEP47Contract, CEP78Contract, Contract
from .deployer import Deployer, DeployResult
from .exceptions import (
    CasperDashError,
    ConfigurationError,
    DeployTimeoutError,
    ExecutionError,
    MetadataError,
    RpcError,
    SimulationError,
)
from .models import DeployInfo, DeployStatus, NFTConfig, NFTDetails, NFTStandard
from .services import CasperServices, NFTServices
from .version import __version__

__all__ = [
    "BaseContract",
    "Cep78Contract",
    "MarketplaceContract",
    "CasperRpcClient",
    "CLValueBuilder",
    "Deploy",
    "KeyAlgorithm",
    "KeyPair",
    "PublicKey",
    "RuntimeArgs",
    "NetworkConfig",
    "CEP18Contract",
    "CEP47Contract",
    "CEP78Contract",
    "Contract",
    "Deployer",
    "DeployResult",
    "CasperDashError",
    "ConfigurationError",
    "DeployTimeoutError",
    "ExecutionError",
    "MetadataError",
    "RpcError",
    "SimulationError",
    "DeployInfo",
    "DeployStatus",
    "NFTConfig",
    "NFTDetails",
    "NFTStandard",
    "CasperServices",
    "NFTServices",
    "__version__",
]
