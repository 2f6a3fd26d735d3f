"""
Contract clients: a generic `Contract` and per-standard method wrappers.
"""
from .base import Contract, stored_cl_value
from .cep18 import CEP18Contract, CEP18InstallArgs, ChangeSecurityArgs
from .cep47 import CEP47Contract, CEP47Events, CEP47InstallArgs, cep47_event_parser
from .cep78 import CEP78Contract

__all__ = [
    "Contract",
    "stored_cl_value",
    "CEP18Contract",
    "CEP18InstallArgs",
    "ChangeSecurityArgs",
    "CEP47Contract",
    "CEP47Events",
    "CEP47InstallArgs",
    "cep47_event_parser",
    "CEP78Contract",
]
