"""
Network configuration for the CasperDash SDK.
"""
import importlib.resources
import json
import os
from typing import Any, Dict, Optional

DEFAULT_NETWORK = "casper-test"

# Fallback payment amounts in motes (1 CSPR = 10^9 motes)
DEFAULT_PAYMENTS = {
    "entryPoint": 5_000_000_000,
    "session": 15_000_000_000,
}


class NetworkConfig:
    """
    Known Casper networks loaded from the packaged `networks.json`.

    Lookups resolve in this order: explicit override, environment variable,
    packaged configuration.
    """

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network configurations

        Returns:
            Mapping of network name to its configuration
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        resource = importlib.resources.files("casperdash_sdk").joinpath("networks.json")
        with resource.open("r", encoding="utf-8") as f:
            cls._networks_cache = json.load(f)
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get a network configuration

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @staticmethod
    def _env_name(network: str, suffix: str) -> str:
        return f"{network.upper().replace('-', '_')}_{suffix}"

    @classmethod
    def get_node_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Get the primary node RPC URL

        Args:
            network: Network name
            override: Explicit URL that wins over everything else

        Environment:
            <NETWORK>_NODE_URL, e.g. CASPER_TEST_NODE_URL
        """
        if override:
            return override
        env_url = os.environ.get(cls._env_name(network, "NODE_URL"))
        if env_url:
            return env_url
        return cls.get_network(network)["nodeUrl"]

    @classmethod
    def get_speculative_node_url(cls, network: str, override: Optional[str] = None) -> Optional[str]:
        """Get the speculative-execution node URL, or None if the network has none"""
        if override:
            return override
        env_url = os.environ.get(cls._env_name(network, "SPECULATIVE_NODE_URL"))
        if env_url:
            return env_url
        return cls.get_network(network).get("speculativeNodeUrl")

    @classmethod
    def get_chain_name(cls, network: str) -> str:
        return cls.get_network(network).get("chainName", network)

    @classmethod
    def get_payment_amount(cls, network: str, kind: str) -> int:
        """
        Get the default payment amount for a call kind

        Args:
            network: Network name
            kind: Call kind ("entryPoint", "session", or a network-specific kind)
        """
        payments = cls.get_network(network).get("payments", {})
        if kind in payments:
            return int(payments[kind])
        if kind in DEFAULT_PAYMENTS:
            return DEFAULT_PAYMENTS[kind]
        raise ValueError(f"No default payment for '{kind}' on network '{network}'")
