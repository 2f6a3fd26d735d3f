"""
Casper primitives over pycspr: CL values, keys, deploys and the node RPC client.
"""
from .cl_values import (
    CLValueBuilder,
    RuntimeArgs,
    cl_value_from_json,
    cl_value_to_json,
    key_to_formatted_str,
    to_cl_map,
)
from .deploy import (
    Deploy,
    deploy_from_json,
    deploy_hash_hex,
    deploy_to_json,
    is_valid_deploy,
    make_deploy,
    sign_deploy,
    standard_payment,
)
from .keys import KeyAlgorithm, KeyPair, PublicKey, public_key_from_hex, public_key_to_hex
from .rpc import CasperRpcClient

__all__ = [
    "CLValueBuilder",
    "RuntimeArgs",
    "cl_value_from_json",
    "cl_value_to_json",
    "key_to_formatted_str",
    "to_cl_map",
    "Deploy",
    "deploy_from_json",
    "deploy_hash_hex",
    "deploy_to_json",
    "is_valid_deploy",
    "make_deploy",
    "sign_deploy",
    "standard_payment",
    "KeyAlgorithm",
    "KeyPair",
    "PublicKey",
    "public_key_from_hex",
    "public_key_to_hex",
    "CasperRpcClient",
]
