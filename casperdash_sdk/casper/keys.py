"""
Account keys for signing deploys.

Key material is held in pycspr's `PrivateKey` / `PublicKey` types so deploys
built with pycspr can be approved directly. Both account algorithms are
supported:
- Ed25519 (public key tag 0x01, 32-byte raw key)
- secp256k1 (public key tag 0x02, 33-byte compressed point)
"""
from pathlib import Path
from typing import Union

import pycspr
from pycspr import KeyAlgorithm, PrivateKey, PublicKey
from pycspr.factory import create_private_key, create_public_key_from_account_key

ACCOUNT_HASH_PREFIX = "account-hash-"

_RAW_KEY_LENGTHS = {
    KeyAlgorithm.ED25519: 32,
    KeyAlgorithm.SECP256K1: 33,
}


def public_key_from_hex(value: str) -> PublicKey:
    """
    Parse a tagged hex public key (e.g. "01ab12...").

    Raises:
        ValueError: If the tag or length is invalid
    """
    if value.startswith("0x"):
        value = value[2:]
    account_key = bytes.fromhex(value)
    if not account_key:
        raise ValueError(f"Invalid public key hex: {value!r}")
    try:
        public_key = create_public_key_from_account_key(account_key)
    except ValueError:
        raise ValueError(f"Unsupported public key tag: {value[:2]}")
    expected = _RAW_KEY_LENGTHS[public_key.algo]
    if len(public_key.pbk) != expected:
        raise ValueError(
            f"{public_key.algo.name} public key must be {expected} bytes, got {len(public_key.pbk)}"
        )
    return public_key


def public_key_to_hex(public_key: PublicKey) -> str:
    return public_key.account_key.hex()


def account_hash_str(public_key: PublicKey) -> str:
    return ACCOUNT_HASH_PREFIX + public_key.to_account_hash().hex()


def verify_signature(public_key: PublicKey, message: bytes, signature: bytes) -> bool:
    """Verify a raw (untagged) signature over message."""
    return pycspr.is_signature_valid(message, signature, public_key.pbk, public_key.algo)


class KeyPair:
    """A pycspr private key together with its public key."""

    def __init__(self, private_key: PrivateKey):
        self.private_key = private_key
        self.algorithm: KeyAlgorithm = private_key.algo
        self.public_key: PublicKey = private_key.to_public_key()

    @classmethod
    def generate(cls, algorithm: KeyAlgorithm = KeyAlgorithm.ED25519) -> "KeyPair":
        pvk, pbk = pycspr.get_key_pair(algorithm)
        return cls(create_private_key(algorithm, pvk, pbk))

    @classmethod
    def from_private_bytes(cls, raw: bytes, algorithm: KeyAlgorithm = KeyAlgorithm.ED25519) -> "KeyPair":
        return cls(pycspr.parse_private_key_bytes(raw, algorithm))

    @classmethod
    def load_private_key_file(
        cls,
        path: Union[str, Path],
        algorithm: KeyAlgorithm = KeyAlgorithm.ED25519,
    ) -> "KeyPair":
        """Load a key pair from a `secret_key.pem` file."""
        return cls(pycspr.parse_private_key(str(path), algorithm))

    @classmethod
    def parse_key_files(
        cls,
        public_key_path: Union[str, Path],
        private_key_path: Union[str, Path],
        algorithm: KeyAlgorithm = KeyAlgorithm.ED25519,
    ) -> "KeyPair":
        """
        Load a key pair from a `public_key_hex` / `secret_key.pem` file pair.

        Raises:
            ValueError: If the public key file does not belong to the private key
        """
        pair = cls.load_private_key_file(private_key_path, algorithm)
        if pycspr.parse_public_key(str(public_key_path)) != pair.public_key:
            raise ValueError("Public key file does not match the private key")
        return pair

    def sign(self, message: bytes) -> bytes:
        """Sign message and return the raw 64-byte signature (no algorithm tag)."""
        return pycspr.get_signature(message, self.private_key.pvk, self.algorithm)

    def __repr__(self) -> str:
        return f"KeyPair(public_key={public_key_to_hex(self.public_key)})"
