"""
Multi-step flows built from the builder contracts.
"""
from .marketplace_with_cep78 import list_and_buy

__all__ = ["list_and_buy"]
