"""
Builder-level CEP-78 calls used by marketplace workflows.
"""
from typing import Optional

from ..casper.cl_values import CLValueBuilder, KeyParameter
from ..casper.deploy import Amount
from ..deployer import DeployResult
from .base import BaseContract


class Cep78Contract(BaseContract):

    def register_token_owner(
        self,
        token_owner: KeyParameter,
        payment_amount: Optional[Amount] = None,
    ) -> DeployResult:
        """Calls `register_owner`, the entry point name the CEP-78 contract exposes"""
        runtime_args = {"token_owner": CLValueBuilder.key(token_owner)}
        return self.call_entry_point("register_owner", runtime_args, payment_amount)

    def approve(
        self,
        operator: KeyParameter,
        token_id: int,
        payment_amount: Optional[Amount] = None,
    ) -> DeployResult:
        """Let `operator` (an account or a contract hash) transfer `token_id`"""
        runtime_args = {
            "operator": CLValueBuilder.key(operator),
            "token_id": CLValueBuilder.u64(token_id),
        }
        return self.call_entry_point("approve", runtime_args, payment_amount)
