import typing
from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional

from eth_utils import is_address, to_checksum_address

from zeyphr_deployment.exceptions import ConfirmationTimeout, DeploymentReverted
from zeyphr_deployment.networks import NetworkProfile

ZERO_ADDRESS = "0x" + "0" * 40


class DeploymentSpec(NamedTuple):
    """What to deploy, with which constructor arguments, and from which account."""

    artifact_name: str
    constructor_args: typing.Tuple[Any, ...]
    sender: Any


class ChainDeployment(NamedTuple):
    """Confirmed contract-creation receipt, as reported by a chain client."""

    contract_address: Optional[str]
    confirmations: int
    reverted: bool = False
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    deployer: Optional[str] = None
    abi: typing.Tuple[dict, ...] = ()


class DeploymentResult(NamedTuple):
    artifact_name: str
    contract_address: str
    constructor_args_used: typing.Tuple[Any, ...]
    confirmations_observed: int
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    deployer: Optional[str] = None
    abi: typing.Tuple[dict, ...] = ()


class ChainClient(ABC):
    """Submits contract-creation transactions and waits for their confirmations."""

    class Timeout(Exception):
        """Raised by chain clients when confirmations are not observed in time."""

    class Reverted(Exception):
        """Raised by chain clients when a creation transaction reverts."""

    @abstractmethod
    def deploy(
        self,
        artifact_name: str,
        constructor_args: typing.Sequence[Any],
        sender: Any,
        required_confirmations: int,
    ) -> ChainDeployment:
        raise NotImplementedError


class ContractDeployer:
    """
    Deploys a single contract and returns only once the creation transaction
    has the confirmations required by the network profile.

    Every call performs a new deployment; callers that need idempotency must
    check for an existing deployment themselves.
    """

    def __init__(self, client: ChainClient):
        self.client = client

    def deploy(self, spec: DeploymentSpec, profile: NetworkProfile) -> DeploymentResult:
        required_confirmations = profile.required_confirmations
        print(
            f"\n(i) Deploying {spec.artifact_name} on {profile.name} "
            f"(waiting for {required_confirmations} confirmation(s))"
        )
        constructor_args = tuple(spec.constructor_args)
        try:
            deployment = self.client.deploy(
                spec.artifact_name,
                constructor_args,
                spec.sender,
                required_confirmations,
            )
        except ChainClient.Reverted as e:
            raise DeploymentReverted(spec.artifact_name, str(e) or "creation transaction reverted")
        except ChainClient.Timeout as e:
            raise ConfirmationTimeout(spec.artifact_name, str(e) or "confirmation wait timed out")

        if deployment.reverted:
            raise DeploymentReverted(spec.artifact_name, "creation transaction reverted")

        address = deployment.contract_address
        if not address or not is_address(address) or address.lower() == ZERO_ADDRESS:
            raise DeploymentReverted(
                spec.artifact_name, f"no contract address in receipt (got {address!r})"
            )

        # 0 required confirmations accepts the transaction as soon as it is mined
        if deployment.confirmations < required_confirmations:
            raise ConfirmationTimeout(
                spec.artifact_name,
                f"observed {deployment.confirmations} of "
                f"{required_confirmations} required confirmations",
            )

        result = DeploymentResult(
            artifact_name=spec.artifact_name,
            contract_address=to_checksum_address(address),
            constructor_args_used=constructor_args,
            confirmations_observed=deployment.confirmations,
            tx_hash=deployment.tx_hash,
            block_number=deployment.block_number,
            deployer=deployment.deployer,
            abi=tuple(deployment.abi),
        )
        print(f"(i) {spec.artifact_name} deployed at {result.contract_address}")
        return result
