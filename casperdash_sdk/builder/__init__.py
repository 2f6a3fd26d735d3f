"""
Contracts bound to a caller and a Deployer.
"""
from .base import BaseContract
from .cep78 import Cep78Contract
from .marketplace import MarketplaceContract, MarketplaceInstallArgs

__all__ = [
    "BaseContract",
    "Cep78Contract",
    "MarketplaceContract",
    "MarketplaceInstallArgs",
]
