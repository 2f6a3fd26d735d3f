#!/usr/bin/env python3
"""
Example of querying an NFT collection with the network configuration.
"""
import os

from casperdash_sdk import NetworkConfig, NFTConfig, NFTServices
from casperdash_sdk.casper import public_key_from_hex
from casperdash_sdk.models import NFTMetadataKind, NFTStandard


def main():
    """
    Demonstrate read-only NFT queries.

    This example shows how to:
    1. List the configured networks
    2. Read a collection's symbol, name and total supply
    3. Fetch every token held by an account
    """
    CONTRACT_HASH = os.environ.get("NFT_CONTRACT_HASH")
    OWNER_PUBLIC_KEY = os.environ.get("OWNER_PUBLIC_KEY")

    if not CONTRACT_HASH or not OWNER_PUBLIC_KEY:
        print("ERROR: NFT_CONTRACT_HASH and OWNER_PUBLIC_KEY environment variables are required")
        return

    print("Available networks:")
    for network_name in NetworkConfig.load_networks().keys():
        print(f"  - {network_name}")
    print()

    network = os.environ.get("CASPER_NETWORK", "casper-test")
    config = NFTConfig(
        contract_hash=CONTRACT_HASH,
        name=os.environ.get("NFT_COLLECTION_NAME", "Collection"),
        cep=NFTStandard.CEP78,
        metadata_kind=NFTMetadataKind.NFT721,
    )
    nfts = NFTServices(config=config, network=network)
    print(f"Node: {nfts.rpc.node_url}")

    contract_info = nfts.get_contract_info()
    print(f"Collection: {contract_info['name']} ({contract_info['symbol']}), supply {contract_info['totalSupply']}")

    owner = public_key_from_hex(OWNER_PUBLIC_KEY)
    for nft in nfts.get_nft_by_public_key(owner, contract_info):
        if isinstance(nft, dict):
            print(f"  token {nft['tokenId']}: unavailable")
            continue
        print(f"  token {nft.token_id}: {[(a.name, a.value) for a in nft.metadata]}")


if __name__ == "__main__":
    main()
