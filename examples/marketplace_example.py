#!/usr/bin/env python3
"""
Example of listing a CEP-78 token on the marketplace and buying it.
"""
import os
import sys

from casperdash_sdk import Cep78Contract, KeyPair, MarketplaceContract
from casperdash_sdk.workflows import list_and_buy


def main():
    """
    Run the full marketplace flow on casper-test.

    The seller approves the marketplace, lists the token and approves the
    marketplace contract; the buyer then runs the buy-item session code.
    """
    required = [
        "SELLER_KEY_PATH", "BUYER_KEY_PATH", "NFT_CONTRACT_HASH",
        "MARKETPLACE_CONTRACT_HASH", "MARKETPLACE_PACKAGE_HASH", "BUY_ITEM_WASM",
    ]
    missing = [name for name in required if not os.environ.get(name)]
    if missing:
        print(f"ERROR: missing environment variables: {', '.join(missing)}")
        sys.exit(1)

    seller = KeyPair.load_private_key_file(os.environ["SELLER_KEY_PATH"])
    buyer = KeyPair.load_private_key_file(os.environ["BUYER_KEY_PATH"])
    with open(os.environ["BUY_ITEM_WASM"], "rb") as f:
        buy_item_wasm = f.read()

    cep78 = Cep78Contract(os.environ["NFT_CONTRACT_HASH"], caller=seller)
    marketplace = MarketplaceContract(
        os.environ["MARKETPLACE_CONTRACT_HASH"],
        os.environ["MARKETPLACE_PACKAGE_HASH"],
        caller=seller,
    )

    results = list_and_buy(
        cep78,
        marketplace,
        os.environ["MARKETPLACE_PACKAGE_HASH"],
        token_id=int(os.environ.get("TOKEN_ID", "0")),
        amount=int(os.environ.get("PRICE_MOTES", "100000000000")),
        buyer=buyer,
        buy_item_wasm=buy_item_wasm,
    )
    for step, result in zip(["approve package", "list item", "approve contract", "buy item"], results):
        print(f"{step}: {result.deploy_hash}")


if __name__ == "__main__":
    main()
