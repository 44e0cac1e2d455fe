import typing
from typing import Any, Dict, Optional

from ape import accounts, chain, project
from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.contracts import ContractContainer
from ape.exceptions import ContractLogicError, ProviderError, TransactionError

from zeyphr_deployment.accounts import AccountResolver
from zeyphr_deployment.constants import DEPLOYER_ROLE
from zeyphr_deployment.deployer import ChainClient, ChainDeployment
from zeyphr_deployment.exceptions import AccountResolutionError, UnknownArtifact
from zeyphr_deployment.networks import NetworkConfig


def get_contract_container(artifact_name: str) -> ContractContainer:
    try:
        return getattr(project, artifact_name)
    except AttributeError:
        raise UnknownArtifact(artifact_name, "no compiled artifact in the ape project")


class ApeChainClient(ChainClient):
    """
    Deploys compiled project artifacts through the connected ape provider.

    Confirmations are counted hardhat-style: the block that includes the
    creation transaction is the first confirmation.
    """

    def deploy(
        self,
        artifact_name: str,
        constructor_args: typing.Sequence[Any],
        sender: AccountAPI,
        required_confirmations: int,
    ) -> ChainDeployment:
        container = get_contract_container(artifact_name)
        try:
            instance = sender.deploy(
                container,
                *constructor_args,
                required_confirmations=max(required_confirmations - 1, 0),
                publish=False,
            )
        except ContractLogicError as e:
            raise ChainClient.Reverted(str(e))
        except ProviderError as e:
            raise ChainClient.Timeout(str(e))
        except TransactionError as e:
            raise ChainClient.Reverted(str(e))

        receipt = instance.receipt
        confirmations = chain.blocks.height - receipt.block_number + 1
        abi = tuple(
            entry.model_dump(mode="json", by_alias=True) for entry in container.contract_type.abi
        )
        return ChainDeployment(
            contract_address=instance.address,
            confirmations=confirmations,
            reverted=receipt.failed,
            tx_hash=receipt.txn_hash,
            block_number=receipt.block_number,
            deployer=receipt.transaction.sender,
            abi=abi,
        )


class ApeAccountResolver(AccountResolver):
    """
    Development networks use the named test accounts (e.g. deployer -> test
    account 0); live networks only know the deployer, loaded from ape's
    account store.
    """

    def __init__(
        self,
        config: NetworkConfig,
        network_name: str,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        self.config = config
        self.network_name = network_name
        self._account = account
        self._autosign = autosign
        self._resolved: Dict[str, AccountAPI] = dict()

    def resolve(self, role: str) -> AccountAPI:
        if role not in self._resolved:
            self._resolved[role] = self._resolve(role)
        return self._resolved[role]

    def _resolve(self, role: str) -> AccountAPI:
        if self.config.is_development_network(self.network_name):
            try:
                index = self.config.named_accounts[role]
            except KeyError:
                raise AccountResolutionError(f"No named account '{role}'.")
            return accounts.test_accounts[index]

        if role != DEPLOYER_ROLE:
            raise AccountResolutionError(
                f"Named account '{role}' is only available on development networks."
            )
        account = self._account or select_account()
        if self._autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        account.set_autosign(self._autosign)
        return account

