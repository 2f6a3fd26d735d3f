"""
Marketplace contract: install, list and buy.
"""
from dataclasses import dataclass
from typing import Optional, Union

from ..casper.cl_values import CLValueBuilder
from ..casper.deploy import Amount
from ..deployer import DeployResult
from ..exceptions import ConfigurationError
from ..utils import convert_hash_str_to_bytes
from .base import BaseContract


@dataclass
class MarketplaceInstallArgs:
    collection_name: str
    collection_symbol: str
    total_token_supply: str


def contract_to_byte_array(contract_hash: str):
    return CLValueBuilder.byte_array(convert_hash_str_to_bytes(contract_hash))


class MarketplaceContract(BaseContract):
    """Marketplace listing NFTs from a CEP-78 collection for CSPR."""

    def install(
        self,
        wasm: bytes,
        args: MarketplaceInstallArgs,
        payment_amount: Optional[Amount] = None,
    ) -> DeployResult:
        runtime_args = {
            "collection_name": CLValueBuilder.string(args.collection_name),
            "collection_symbol": CLValueBuilder.string(args.collection_symbol),
            "total_token_supply": CLValueBuilder.string(args.total_token_supply),
        }
        return self.call_session_wasm(wasm, runtime_args, payment_amount)

    def list_item(
        self,
        token_contract_hash: str,
        token_id: Union[int, str],
        amount: Amount,
        payment_amount: Optional[Amount] = None,
    ) -> DeployResult:
        """List `token_id` of the given collection for `amount` motes"""
        runtime_args = {
            "token": contract_to_byte_array(token_contract_hash),
            "token_id": CLValueBuilder.string(str(token_id)),
            "amount": CLValueBuilder.u512(amount),
        }
        return self.call_entry_point("list_item", runtime_args, payment_amount)

    def buy_item(
        self,
        wasm: bytes,
        token_contract_hash: str,
        token_id: Union[int, str],
        amount: Amount,
        payment_amount: Optional[Amount] = None,
    ) -> DeployResult:
        """
        Buy a listed token through the buy-item session code

        Raises:
            ConfigurationError: If the marketplace contract hash is not set
        """
        if not self.contract_hash:
            raise ConfigurationError("Marketplace contract hash is required to buy an item")
        runtime_args = {
            "market": contract_to_byte_array(self.contract_hash),
            "token": contract_to_byte_array(token_contract_hash),
            "token_id": CLValueBuilder.string(str(token_id)),
            "amount": CLValueBuilder.u512(amount),
        }
        if payment_amount is None:
            payment_amount = self.default_payment("buyItem")
        return self.call_session_wasm(wasm, runtime_args, payment_amount)
