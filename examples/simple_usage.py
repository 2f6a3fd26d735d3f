#!/usr/bin/env python3
"""
Simple example of sending a CEP-18 transfer.
"""
import os

from casperdash_sdk import CEP18Contract, Deployer, KeyPair
from casperdash_sdk.casper import public_key_from_hex, public_key_to_hex


def main():
    """
    Demonstrate building, validating and sending a deploy.

    This example shows how to:
    1. Load a signing key from a PEM file
    2. Build a signed transfer deploy
    3. Dry-run it on the speculative node, then broadcast and wait
    """
    SECRET_KEY_PATH = os.environ.get("SECRET_KEY_PATH")
    TOKEN_CONTRACT_HASH = os.environ.get("TOKEN_CONTRACT_HASH")
    RECIPIENT = os.environ.get("RECIPIENT_PUBLIC_KEY")

    if not SECRET_KEY_PATH or not TOKEN_CONTRACT_HASH or not RECIPIENT:
        print("ERROR: SECRET_KEY_PATH, TOKEN_CONTRACT_HASH and RECIPIENT_PUBLIC_KEY environment variables are required")
        return

    keys = KeyPair.load_private_key_file(SECRET_KEY_PATH)
    print(f"Sender: {public_key_to_hex(keys.public_key)}")

    token = CEP18Contract("casper-test", TOKEN_CONTRACT_HASH)
    deploy = token.transfer(
        public_key_from_hex(RECIPIENT),
        1_000,
        payment_amount=3_000_000_000,
        sender=keys.public_key,
        signing_keys=[keys],
    )

    deployer = Deployer.from_network("casper-test")
    try:
        result = deployer.send_safe(deploy)
        print("Transfer succeeded!")
        print(f"Deploy hash: {result.deploy_hash}")
        print(f"Block hash: {result.info.execution_results[0].block_hash}")
    except Exception as e:
        print(f"Error sending transfer: {str(e)}")


if __name__ == "__main__":
    main()
