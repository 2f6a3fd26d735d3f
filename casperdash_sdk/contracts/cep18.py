"""
CEP-18 (fungible token) contract client.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from ..casper.cl_values import CLValueBuilder, KeyParameter, RuntimeArgs
from ..casper.deploy import Amount, Deploy
from ..casper.keys import KeyPair, PublicKey
from ..casper.rpc import CasperRpcClient
from ..exceptions import ConfigurationError
from .base import Contract

TokenAmount = Union[int, str]


@dataclass
class CEP18InstallArgs:
    """
    CEP-18 installation parameters.

    Attributes:
        name: Token name
        symbol: Token symbol
        decimals: Number of decimals (u8)
        total_supply: Initial supply (u256)
        events_mode: Optional events mode (u8)
        enable_mint_burn: Optional flag enabling mint and burn entry points
    """
    name: str
    symbol: str
    decimals: int
    total_supply: TokenAmount
    events_mode: Optional[int] = None
    enable_mint_burn: Optional[bool] = None


@dataclass
class ChangeSecurityArgs:
    """Account lists for `change_security`; unset lists are left out"""
    admin_list: Optional[List[KeyParameter]] = None
    minter_list: Optional[List[KeyParameter]] = None
    burner_list: Optional[List[KeyParameter]] = None
    mint_and_burn_list: Optional[List[KeyParameter]] = None
    none_list: Optional[List[KeyParameter]] = None


class CEP18Contract(Contract):
    """Builds deploys for CEP-18 entry points."""

    def __init__(
        self,
        network_name: str,
        contract_hash: Optional[str] = None,
        contract_package_hash: Optional[str] = None,
        rpc: Optional[CasperRpcClient] = None,
    ):
        super().__init__(contract_hash, contract_package_hash, rpc)
        self.network_name = network_name

    def install(
        self,
        wasm: bytes,
        args: CEP18InstallArgs,
        payment_amount: Amount,
        sender: PublicKey,
        network_name: Optional[str] = None,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """
        Install CEP-18

        Args:
            wasm: Contract wasm
            args: Install arguments
            payment_amount: Payment for the install deploy
            sender: Deploy sender
            network_name: Network to deploy to (defaults to the client's)
            signing_keys: Keys to sign with; the deploy is unsigned without them
        """
        runtime_args = {
            "name": CLValueBuilder.string(args.name),
            "symbol": CLValueBuilder.string(args.symbol),
            "decimals": CLValueBuilder.u8(args.decimals),
            "total_supply": CLValueBuilder.u256(args.total_supply),
        }
        if args.events_mode is not None:
            runtime_args["events_mode"] = CLValueBuilder.u8(args.events_mode)
        if args.enable_mint_burn is not None:
            runtime_args["enable_mint_burn"] = CLValueBuilder.u8(1 if args.enable_mint_burn else 0)

        return self.call_session_wasm(
            wasm,
            runtime_args,
            payment_amount,
            sender,
            network_name or self.network_name,
            signing_keys,
        )

    def _call(
        self,
        entry_point: str,
        runtime_args: RuntimeArgs,
        payment_amount: Amount,
        sender: PublicKey,
        network_name: Optional[str],
        signing_keys: Optional[Sequence[KeyPair]],
    ) -> Deploy:
        return self.call_entrypoint(
            entry_point,
            runtime_args,
            sender,
            network_name or self.network_name,
            payment_amount,
            signing_keys,
        )

    def transfer(
        self,
        recipient: KeyParameter,
        amount: TokenAmount,
        payment_amount: Amount,
        sender: PublicKey,
        network_name: Optional[str] = None,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Transfer tokens from the sender to `recipient`"""
        runtime_args = {
            "recipient": CLValueBuilder.key(recipient),
            "amount": CLValueBuilder.u256(amount),
        }
        return self._call("transfer", runtime_args, payment_amount, sender, network_name, signing_keys)

    def transfer_from(
        self,
        owner: KeyParameter,
        recipient: KeyParameter,
        amount: TokenAmount,
        payment_amount: Amount,
        sender: PublicKey,
        network_name: Optional[str] = None,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Transfer tokens the sender was approved to spend on behalf of `owner`"""
        runtime_args = {
            "owner": CLValueBuilder.key(owner),
            "recipient": CLValueBuilder.key(recipient),
            "amount": CLValueBuilder.u256(amount),
        }
        return self._call("transfer_from", runtime_args, payment_amount, sender, network_name, signing_keys)

    def _spender_call(
        self,
        entry_point: str,
        spender: KeyParameter,
        amount: TokenAmount,
        payment_amount: Amount,
        sender: PublicKey,
        network_name: Optional[str],
        signing_keys: Optional[Sequence[KeyPair]],
    ) -> Deploy:
        runtime_args = {
            "spender": CLValueBuilder.key(spender),
            "amount": CLValueBuilder.u256(amount),
        }
        return self._call(entry_point, runtime_args, payment_amount, sender, network_name, signing_keys)

    def approve(self, spender, amount, payment_amount, sender, network_name=None, signing_keys=None) -> Deploy:
        """Allow `spender` to spend `amount` of the sender's tokens"""
        return self._spender_call("approve", spender, amount, payment_amount, sender, network_name, signing_keys)

    def increase_allowance(self, spender, amount, payment_amount, sender, network_name=None, signing_keys=None) -> Deploy:
        return self._spender_call(
            "increase_allowance", spender, amount, payment_amount, sender, network_name, signing_keys
        )

    def decrease_allowance(self, spender, amount, payment_amount, sender, network_name=None, signing_keys=None) -> Deploy:
        return self._spender_call(
            "decrease_allowance", spender, amount, payment_amount, sender, network_name, signing_keys
        )

    def mint(
        self,
        owner: KeyParameter,
        amount: TokenAmount,
        payment_amount: Amount,
        sender: PublicKey,
        network_name: Optional[str] = None,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Create `amount` tokens for `owner`, increasing the total supply"""
        runtime_args = {
            "owner": CLValueBuilder.key(owner),
            "amount": CLValueBuilder.u256(amount),
        }
        return self._call("mint", runtime_args, payment_amount, sender, network_name, signing_keys)

    def burn(
        self,
        owner: KeyParameter,
        amount: TokenAmount,
        payment_amount: Amount,
        sender: PublicKey,
        network_name: Optional[str] = None,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """Destroy `amount` tokens of `owner`, decreasing the total supply"""
        runtime_args = {
            "owner": CLValueBuilder.key(owner),
            "amount": CLValueBuilder.u256(amount),
        }
        return self._call("burn", runtime_args, payment_amount, sender, network_name, signing_keys)

    def change_security(
        self,
        args: ChangeSecurityArgs,
        payment_amount: Amount,
        sender: PublicKey,
        network_name: Optional[str] = None,
        signing_keys: Optional[Sequence[KeyPair]] = None,
    ) -> Deploy:
        """
        Change account roles

        Empty lists are left out: a List<Key> argument needs at least one
        item to carry its type.

        Raises:
            ConfigurationError: If no non-empty list is provided
        """
        runtime_args = {}
        for name in ("admin_list", "minter_list", "burner_list", "mint_and_burn_list", "none_list"):
            accounts = getattr(args, name)
            if accounts:
                runtime_args[name] = CLValueBuilder.list([CLValueBuilder.key(account) for account in accounts])

        if len(runtime_args) == 0:
            raise ConfigurationError("Should provide at least one arg")

        return self._call("change_security", runtime_args, payment_amount, sender, network_name, signing_keys)
