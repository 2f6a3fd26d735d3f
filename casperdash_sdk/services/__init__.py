"""
Read-only node and NFT collection queries.
"""
from .casper import CasperServices
from .nft import NFTServices

__all__ = ["CasperServices", "NFTServices"]
