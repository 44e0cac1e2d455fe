import os
import typing
from typing import Any, Optional

from ape import networks
from ape.exceptions import ApeException
from ape_etherscan.utils import API_KEY_ENV_KEY_MAP

from zeyphr_deployment.exceptions import ExplorerError
from zeyphr_deployment.networks import NetworkProfile
from zeyphr_deployment.verify import ExplorerClient


def _ecosystem_name(profile: NetworkProfile) -> str:
    return profile.ape_network.split(":")[0]


def export_explorer_api_key(profile: NetworkProfile) -> Optional[str]:
    """
    Exposes the profile's explorer API key to ape-etherscan, which reads it
    from the environment. A key already set in the environment wins.
    """
    explorer_envvar = API_KEY_ENV_KEY_MAP.get(_ecosystem_name(profile))
    if not explorer_envvar or not profile.explorer_api_key:
        return None
    os.environ.setdefault(explorer_envvar, profile.explorer_api_key)
    return explorer_envvar


class ApeExplorerClient(ExplorerClient):
    """
    Publishes contracts through the explorer plugin of the connected ape network
    (ape-etherscan, pointed at the network's explorer in ape-config.yaml).

    Constructor arguments are recovered by the plugin from the creation transaction.
    """

    def __init__(self, network_manager=None):
        self.networks = network_manager or networks

    def submit(
        self,
        contract_name: str,
        contract_address: str,
        constructor_args: typing.Sequence[Any],
        profile: NetworkProfile,
    ) -> str:
        try:
            explorer = self.networks.provider.network.explorer
        except ApeException as e:
            raise ExplorerError(f"Cannot reach the explorer of {profile.name}: {e}")
        if explorer is None:
            raise ExplorerError(
                f"No explorer plugin configured for {profile.name} "
                f"(missing 'etherscan' section in ape-config.yaml?)"
            )

        try:
            explorer.publish_contract(contract_address)
            address_url = explorer.get_address_url(contract_address)
        except ApeException as e:
            raise ExplorerError(str(e) or type(e).__name__)
        return f"{contract_name} published to {address_url}"
