"""
List a CEP-78 token on the marketplace and buy it with a second account.
"""
import logging
from typing import List, Optional

from ..builder.cep78 import Cep78Contract
from ..builder.marketplace import MarketplaceContract, contract_to_byte_array
from ..casper.deploy import Amount
from ..casper.keys import KeyPair, public_key_to_hex
from ..deployer import DeployResult

logger = logging.getLogger(__name__)


def list_and_buy(
    cep78: Cep78Contract,
    marketplace: MarketplaceContract,
    marketplace_package_hash: str,
    token_id: int,
    amount: Amount,
    buyer: KeyPair,
    buy_item_wasm: bytes,
    token_contract_hash: Optional[str] = None,
) -> List[DeployResult]:
    """
    Run the full listing and purchase of one token

    Steps, each sent with `send_safe` and awaited before the next:
    approve the marketplace package, list the item, approve the marketplace
    contract, switch the marketplace caller to `buyer`, buy the item.

    Args:
        cep78: Collection contract with the seller as caller
        marketplace: Marketplace contract with the seller as caller
        marketplace_package_hash: Package hash of the marketplace contract
        token_id: Token to sell
        amount: Price in motes
        buyer: Key pair of the buying account
        buy_item_wasm: Buy-item session code
        token_contract_hash: Collection contract hash (defaults to `cep78`'s)

    Returns:
        Results of the four deploys, in order
    """
    token_contract_hash = token_contract_hash or cep78.contract_hash
    results: List[DeployResult] = []

    logger.info(f"Approving marketplace package for token {token_id}")
    results.append(cep78.approve(contract_to_byte_array(marketplace_package_hash), token_id))

    logger.info(f"Listing token {token_id} for {amount} motes")
    results.append(marketplace.list_item(token_contract_hash, token_id, amount))

    logger.info(f"Approving marketplace contract for token {token_id}")
    results.append(cep78.approve(contract_to_byte_array(marketplace.contract_hash), token_id))

    marketplace.set_caller(buyer)
    logger.info(f"Buying token {token_id} as {public_key_to_hex(buyer.public_key)}")
    results.append(marketplace.buy_item(buy_item_wasm, token_contract_hash, token_id, amount))
    return results
