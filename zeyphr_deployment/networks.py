from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, NamedTuple, Optional

from zeyphr_deployment.constants import (
    DEFAULT_APE_NETWORK,
    DEFAULT_DEVELOPMENT_NETWORKS,
    DEFAULT_FEE_PERCENT,
    DEFAULT_NAMED_ACCOUNTS,
    DEFAULT_REQUIRED_CONFIRMATIONS,
    DEPLOYER_ROLE,
    MAX_FEE_PERCENT,
    MIN_FEE_PERCENT,
    NETWORKS_CONFIG_FILEPATH,
)
from zeyphr_deployment.exceptions import NetworkConfigError, UnknownNetwork
from zeyphr_deployment.utils import _load_yaml, resolve_env_value


class NetworkProfile(NamedTuple):
    """Deployment parameters of a single target network."""

    name: str
    chain_id: int
    required_confirmations: int = DEFAULT_REQUIRED_CONFIRMATIONS
    explorer_api_url: Optional[str] = None
    explorer_browser_url: Optional[str] = None
    explorer_api_key: Optional[str] = None
    rpc_url: Optional[str] = None
    ape_network: str = DEFAULT_APE_NETWORK


class DeploymentSettings(NamedTuple):
    """Constructor inputs of the Admin contract."""

    fee_percent: int = DEFAULT_FEE_PERCENT
    fee_account: str = DEPLOYER_ROLE


class NetworkConfig:
    """
    Immutable network configuration table.

    Built once at process start and handed by reference to everything that
    needs to resolve a network profile or classify a network.
    """

    def __init__(
        self,
        profiles: Mapping[str, NetworkProfile],
        development_networks: Iterable[str] = DEFAULT_DEVELOPMENT_NETWORKS,
        named_accounts: Optional[Mapping[str, int]] = None,
        deployment: Optional[DeploymentSettings] = None,
    ):
        self._profiles = MappingProxyType(dict(profiles))
        self._development_networks = frozenset(development_networks)
        self._named_accounts = MappingProxyType(dict(named_accounts or DEFAULT_NAMED_ACCOUNTS))
        self._deployment = deployment or DeploymentSettings()

    @property
    def profiles(self) -> Mapping[str, NetworkProfile]:
        return self._profiles

    @property
    def development_networks(self) -> FrozenSet[str]:
        return self._development_networks

    @property
    def named_accounts(self) -> Mapping[str, int]:
        return self._named_accounts

    @property
    def deployment(self) -> DeploymentSettings:
        return self._deployment

    def resolve(self, network_name: str) -> NetworkProfile:
        """Returns the profile registered for the network."""
        if not isinstance(network_name, str) or not network_name.strip():
            raise ValueError("Network name must be a non-empty string.")
        try:
            return self._profiles[network_name]
        except KeyError:
            raise UnknownNetwork(network_name)

    def is_development_network(self, network_name: str) -> bool:
        """Returns True if the network is local or ephemeral."""
        return network_name in self._development_networks

    def with_deployment(self, **changes) -> "NetworkConfig":
        """Returns a copy of this configuration with different deployment settings."""
        changes = {key: value for key, value in changes.items() if value is not None}
        return NetworkConfig(
            profiles=self._profiles,
            development_networks=self._development_networks,
            named_accounts=self._named_accounts,
            deployment=self._deployment._replace(**changes),
        )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "NetworkConfig":
        if not isinstance(config, dict):
            raise NetworkConfigError("Malformed network configuration.")

        networks = config.get("networks")
        if not networks or not isinstance(networks, dict):
            raise NetworkConfigError("'networks' is not set in network configuration.")

        profiles = dict()
        for name, network_config in networks.items():
            profiles[name] = _profile_from_dict(name, network_config)

        development_networks = config.get("development_networks", DEFAULT_DEVELOPMENT_NETWORKS)
        if not isinstance(development_networks, list):
            raise NetworkConfigError("'development_networks' must be a list of network names.")

        named_accounts = config.get("named_accounts", DEFAULT_NAMED_ACCOUNTS)
        if not isinstance(named_accounts, dict):
            raise NetworkConfigError("'named_accounts' must map account roles to indices.")
        for role, index in named_accounts.items():
            if isinstance(index, bool) or not isinstance(index, int) or index < 0:
                raise NetworkConfigError(f"Invalid account index for named account '{role}'.")

        deployment = _deployment_from_dict(config.get("deployment") or dict())

        return cls(
            profiles=profiles,
            development_networks=development_networks,
            named_accounts=named_accounts,
            deployment=deployment,
        )

    @classmethod
    def from_yaml(cls, filepath: Optional[Path] = None) -> "NetworkConfig":
        filepath = filepath or NETWORKS_CONFIG_FILEPATH
        return cls.from_dict(_load_yaml(filepath))


def _profile_from_dict(name: str, network_config: Dict[str, Any]) -> NetworkProfile:
    if not isinstance(network_config, dict):
        raise NetworkConfigError(f"Malformed configuration for network '{name}'.")

    chain_id = network_config.get("chain_id")
    if chain_id is None:
        raise NetworkConfigError(f"chain_id is not set for network '{name}'.")

    # hardhat calls it blockConfirmations
    required_confirmations = network_config.get(
        "required_confirmations",
        network_config.get("block_confirmations", DEFAULT_REQUIRED_CONFIRMATIONS),
    )
    try:
        chain_id = int(chain_id)
        required_confirmations = int(required_confirmations)
    except (TypeError, ValueError):
        raise NetworkConfigError(
            f"chain_id and confirmations of network '{name}' must be integers."
        )
    if required_confirmations < 0:
        raise NetworkConfigError(f"Negative confirmation count for network '{name}'.")

    return NetworkProfile(
        name=name,
        chain_id=chain_id,
        required_confirmations=required_confirmations,
        explorer_api_url=resolve_env_value(network_config.get("explorer_api_url")),
        explorer_browser_url=resolve_env_value(network_config.get("explorer_browser_url")),
        explorer_api_key=resolve_env_value(network_config.get("explorer_api_key")),
        rpc_url=resolve_env_value(network_config.get("rpc_url")),
        ape_network=network_config.get("ape_network", DEFAULT_APE_NETWORK),
    )


def _deployment_from_dict(deployment_config: Dict[str, Any]) -> DeploymentSettings:
    fee_percent = deployment_config.get("fee_percent", DEFAULT_FEE_PERCENT)
    # yaml booleans are ints too
    if isinstance(fee_percent, bool) or not isinstance(fee_percent, int):
        raise NetworkConfigError("'fee_percent' must be an integer.")
    if not MIN_FEE_PERCENT <= fee_percent <= MAX_FEE_PERCENT:
        raise NetworkConfigError(
            f"'fee_percent' must be between {MIN_FEE_PERCENT} and {MAX_FEE_PERCENT}."
        )
    fee_account = deployment_config.get("fee_account", DEPLOYER_ROLE)
    return DeploymentSettings(fee_percent=fee_percent, fee_account=fee_account)
