"""
Deploy assembly, signing and JSON rendering.

Deploys are pycspr `Deploy` values: pycspr computes the body and deploy
hashes, signs approvals and renders the node JSON. The helpers here accept
the SDK's inputs (numeric-string amounts, prefixed hashes, `KeyPair`s).
"""
import time
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import pycspr
from ecdsa import BadSignatureError
from pycspr import InvalidDeployException
from pycspr.types.node.rpc import Deploy, DeployOfModuleBytes, DeployOfStoredContractByHash
from pycspr.utils import convertor

from .cl_values import RuntimeArgs
from .keys import KeyPair, PublicKey

DEFAULT_TTL = "30m"
DEFAULT_GAS_PRICE = 1

Amount = Union[int, str]


def _hash_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        value = bytes.fromhex(value)
    if len(value) != 32:
        raise ValueError(f"Expected a 32-byte hash, got {len(value)} bytes")
    return value


def to_motes(amount: Amount) -> int:
    """Accept an int or a numeric string and return the amount in motes."""
    if isinstance(amount, str):
        if not amount.strip().isdigit():
            raise ValueError(f"Invalid payment amount: {amount!r}")
        return int(amount)
    if amount < 0:
        raise ValueError(f"Invalid payment amount: {amount}")
    return int(amount)


def deploy_timestamp(timestamp: Optional[float] = None) -> float:
    """
    Snap a timestamp (seconds, defaults to now) to a millisecond that hashes
    the same before and after a trip through the deploy JSON.

    pycspr truncates when hashing and cannot render whole seconds, so such
    values move forward to the next millisecond that survives both.
    """
    ms = round((time.time() if timestamp is None else timestamp) * 1000)
    while True:
        value = ms / 1000
        if ms % 1000 and int(value * 1000) == ms:
            rendered = convertor.iso_datetime_from_timestamp(value)
            if int(convertor.timestamp_from_iso_datetime(rendered) * 1000) == ms:
                return value
        ms += 1


def standard_payment(amount: Amount) -> DeployOfModuleBytes:
    """Payment item that spends `amount` motes from the sender's main purse."""
    return pycspr.create_standard_payment(to_motes(amount))


def new_stored_contract_by_hash(
    contract_hash: Union[str, bytes],
    entry_point: str,
    args: RuntimeArgs,
) -> DeployOfStoredContractByHash:
    return DeployOfStoredContractByHash(
        args=dict(args),
        entry_point=entry_point,
        hash=_hash_bytes(contract_hash),
    )


def new_module_bytes(wasm: bytes, args: RuntimeArgs) -> DeployOfModuleBytes:
    return DeployOfModuleBytes(args=dict(args), module_bytes=bytes(wasm))


def make_deploy(
    account: PublicKey,
    chain_name: str,
    session: Any,
    payment: DeployOfModuleBytes,
    ttl: str = DEFAULT_TTL,
    gas_price: int = DEFAULT_GAS_PRICE,
    timestamp: Optional[float] = None,
) -> Deploy:
    """
    Assemble an unsigned deploy.

    Args:
        account: Public key of the sending account
        chain_name: Network name, e.g. "casper-test"
        session: Session item
        payment: Payment item
        ttl: Humanized time to live, e.g. "30m" (at most two hours)
        gas_price: Gas price multiplier
        timestamp: Creation time in seconds since epoch (defaults to now)
    """
    params = pycspr.create_deploy_parameters(
        account=account,
        chain_name=chain_name,
        gas_price=gas_price,
        timestamp=deploy_timestamp(timestamp),
        ttl=ttl,
    )
    return pycspr.create_deploy(params, payment, session)


def deploy_hash_hex(deploy: Deploy) -> str:
    return deploy.hash.hex()


def sign_deploy(deploy: Deploy, signing_keys: Optional[Sequence[KeyPair]] = None) -> Deploy:
    """Add one approval per key pair; a key that already approved is not repeated."""
    for key_pair in signing_keys or ():
        deploy.approve(key_pair.private_key)
    return deploy


def is_valid_deploy(deploy: Deploy) -> bool:
    """Check the body hash, deploy hash and every approval signature."""
    try:
        pycspr.validate_deploy(deploy)
    except (InvalidDeployException, BadSignatureError):
        return False
    return True


def deploy_to_json(deploy: Deploy) -> Dict[str, Any]:
    """Render as the node expects in `account_put_deploy` params."""
    return {"deploy": pycspr.to_json(deploy)}


def deploy_from_json(data: Mapping[str, Any]) -> Deploy:
    """
    Parse a deploy from its JSON form, accepting a `{"deploy": ...}` wrapper.

    Raises:
        ValueError: If the JSON is not a well-formed deploy
    """
    if "deploy" in data and "header" not in data:
        data = data["deploy"]
    try:
        return pycspr.from_json(dict(data), Deploy)
    except (AssertionError, KeyError, IndexError, TypeError) as e:
        raise ValueError(f"Invalid deploy JSON: {e}") from e
