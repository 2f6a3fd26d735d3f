"""
Exceptions for the CasperDash SDK.
"""
from typing import Any, Optional


class CasperDashError(Exception):
    """Base exception for all SDK errors."""
    pass


class ConfigurationError(CasperDashError, ValueError):
    """
    Raised when call arguments are missing or conflict.

    Always raised before any network interaction takes place.
    """
    pass


class RpcError(CasperDashError):
    """Raised when a JSON-RPC call fails or returns an error envelope."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        self.code = code
        self.data = data
        super().__init__(message)


class SimulationError(CasperDashError):
    """
    Raised when speculative execution reports a failure.

    The deploy is never broadcast when this is raised.
    """

    def __init__(self, error_message: str):
        self.error_message = error_message
        super().__init__(error_message)


class ExecutionError(CasperDashError):
    """Raised when a broadcast deploy finalizes with a failure."""

    def __init__(self, deploy_hash: str, error_message: str):
        self.deploy_hash = deploy_hash
        self.error_message = error_message
        super().__init__(f"Contract execution: {error_message}")


class DeployTimeoutError(CasperDashError, TimeoutError):
    """Raised when polling runs out of attempts without a terminal result."""

    def __init__(self, deploy_hash: str, attempts: int):
        self.deploy_hash = deploy_hash
        self.attempts = attempts
        super().__init__(
            f"Deploy {deploy_hash} not finalized after {attempts} attempts"
        )


class MetadataError(CasperDashError):
    """Raised when NFT metadata cannot be resolved."""
    pass
