import copy
from typing import Any, NamedTuple, Tuple

import pytest
from eth_utils import to_checksum_address

from zeyphr_deployment.accounts import AccountResolver
from zeyphr_deployment.deployer import ChainClient, ChainDeployment, ContractDeployer
from zeyphr_deployment.exceptions import AccountResolutionError
from zeyphr_deployment.networks import NetworkConfig
from zeyphr_deployment.pipeline import DeploymentPipeline
from zeyphr_deployment.verify import ExplorerClient, VerificationSubmitter

DEPLOYER_ADDRESS = to_checksum_address("0x" + "ab" * 20)
PLAYER_ADDRESS = to_checksum_address("0x" + "cd" * 20)
EXPLORER_API_URL = "https://explorer.evm.iota.org/api"

NETWORKS = {
    "development_networks": ["hardhat", "localhost"],
    "networks": {
        "hardhat": {"chain_id": 31337, "required_confirmations": 1},
        "localhost": {
            "chain_id": 31337,
            "required_confirmations": 1,
            "ape_network": "ethereum:local:node",
        },
        "iota": {
            "chain_id": 1075,
            "required_confirmations": 6,
            "explorer_api_url": EXPLORER_API_URL,
            "explorer_browser_url": "https://explorer.evm.iota.org",
            "explorer_api_key": "empty",
            "ape_network": "ethereum:iota:node",
        },
    },
    "named_accounts": {"deployer": 0, "player": 1},
    "deployment": {"fee_percent": 1, "fee_account": "deployer"},
}


class FakeAccount(NamedTuple):
    address: str


class DeployCall(NamedTuple):
    artifact_name: str
    constructor_args: Tuple[Any, ...]
    sender: Any
    required_confirmations: int


class FakeChainClient(ChainClient):
    """Deterministic in-memory chain; every deployment gets the next address."""

    def __init__(self, failures=None):
        self.failures = failures or dict()
        self.calls = list()
        self._nonce = 0

    def deploy(self, artifact_name, constructor_args, sender, required_confirmations):
        self.calls.append(
            DeployCall(artifact_name, tuple(constructor_args), sender, required_confirmations)
        )
        failure = self.failures.get(artifact_name)
        if failure is not None:
            raise failure
        self._nonce += 1
        return ChainDeployment(
            contract_address=to_checksum_address(f"0x{self._nonce:040x}"),
            confirmations=required_confirmations,
            tx_hash=f"0x{self._nonce:064x}",
            block_number=100 + self._nonce,
            deployer=sender.address,
            abi=({"type": "constructor", "inputs": []},),
        )

    @property
    def deployed_artifacts(self):
        return [call.artifact_name for call in self.calls]


class FakeExplorerClient(ExplorerClient):
    """Replies per contract name; exceptions are raised, strings returned."""

    def __init__(self, responses=None):
        self.responses = responses or dict()
        self.calls = list()

    def submit(self, contract_name, contract_address, constructor_args, profile):
        self.calls.append((contract_name, contract_address, tuple(constructor_args), profile.name))
        response = self.responses.get(contract_name, "Pass - Verified")
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def verified_contracts(self):
        return [call[0] for call in self.calls]


class FakeAccountResolver(AccountResolver):
    def __init__(self, accounts=None):
        self.accounts = accounts or {
            "deployer": FakeAccount(DEPLOYER_ADDRESS),
            "player": FakeAccount(PLAYER_ADDRESS),
        }

    def resolve(self, role):
        try:
            return self.accounts[role]
        except KeyError:
            raise AccountResolutionError(f"No named account '{role}'.")


@pytest.fixture
def networks_dict():
    return copy.deepcopy(NETWORKS)


@pytest.fixture
def network_config():
    return NetworkConfig.from_dict(NETWORKS)


@pytest.fixture
def chain_client():
    return FakeChainClient()


@pytest.fixture
def explorer_client():
    return FakeExplorerClient()


@pytest.fixture
def account_resolver():
    return FakeAccountResolver()


@pytest.fixture
def make_pipeline(network_config, chain_client, explorer_client, account_resolver):
    def _make_pipeline(
        config=None, chain=None, explorer=None, accounts=None, verifier=None, autosign=True
    ):
        return DeploymentPipeline(
            config=config or network_config,
            deployer=ContractDeployer(chain or chain_client),
            verifier=verifier or VerificationSubmitter(explorer or explorer_client),
            accounts=accounts or account_resolver,
            autosign=autosign,
        )

    return _make_pipeline


@pytest.fixture
def deployer_address():
    return DEPLOYER_ADDRESS


@pytest.fixture
def player_address():
    return PLAYER_ADDRESS
