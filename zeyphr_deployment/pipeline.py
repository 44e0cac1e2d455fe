"""
Two-stage Zeyphr deployment: ZeyphrAdmin, then ZeyphrMarketplace.

The run is an explicit state machine. ZeyphrMarketplace takes the deployed
ZeyphrAdmin address as its only constructor argument, so its spec can only be
built from the Admin DeploymentResult. Verification is gated once per run on
the network's development classification.
"""

import typing
from collections import OrderedDict
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from zeyphr_deployment.accounts import AccountResolver
from zeyphr_deployment.confirm import _confirm_resolution
from zeyphr_deployment.constants import DEPLOYER_ROLE, ZEYPHR_ADMIN, ZEYPHR_MARKETPLACE
from zeyphr_deployment.deployer import ContractDeployer, DeploymentResult, DeploymentSpec
from zeyphr_deployment.exceptions import (
    DeploymentError,
    InvalidTransition,
    MissingExplorerConfig,
)
from zeyphr_deployment.networks import DeploymentSettings, NetworkConfig, NetworkProfile
from zeyphr_deployment.verify import (
    VerificationOutcome,
    VerificationRequest,
    VerificationStatus,
    VerificationSubmitter,
)

STAGE_NETWORK = "network"
STAGE_ADMIN = "admin"
STAGE_MARKETPLACE = "marketplace"
STAGE_VERIFICATION = "verification"

CONTRACTS = (ZEYPHR_ADMIN, ZEYPHR_MARKETPLACE)


class PipelineState(Enum):
    START = "start"
    ADMIN_DEPLOYING = "admin-deploying"
    ADMIN_DEPLOYED = "admin-deployed"
    MARKETPLACE_DEPLOYING = "marketplace-deploying"
    MARKETPLACE_DEPLOYED = "marketplace-deployed"
    VERIFYING = "verifying"
    COMPLETE = "complete"
    FAILED = "failed"


TRANSITIONS = {
    PipelineState.START: {PipelineState.ADMIN_DEPLOYING, PipelineState.FAILED},
    PipelineState.ADMIN_DEPLOYING: {PipelineState.ADMIN_DEPLOYED, PipelineState.FAILED},
    PipelineState.ADMIN_DEPLOYED: {PipelineState.MARKETPLACE_DEPLOYING, PipelineState.FAILED},
    PipelineState.MARKETPLACE_DEPLOYING: {
        PipelineState.MARKETPLACE_DEPLOYED,
        PipelineState.FAILED,
    },
    PipelineState.MARKETPLACE_DEPLOYED: {
        PipelineState.VERIFYING,
        PipelineState.COMPLETE,
        PipelineState.FAILED,
    },
    PipelineState.VERIFYING: {PipelineState.COMPLETE, PipelineState.FAILED},
    PipelineState.COMPLETE: set(),
    PipelineState.FAILED: set(),
}


def admin_spec(settings: DeploymentSettings, fee_account: str, sender) -> DeploymentSpec:
    """ZeyphrAdmin(feePercent, feeAccount)"""
    return DeploymentSpec(
        artifact_name=ZEYPHR_ADMIN,
        constructor_args=(settings.fee_percent, fee_account),
        sender=sender,
    )


def marketplace_spec(admin: DeploymentResult, sender) -> DeploymentSpec:
    """ZeyphrMarketplace(admin)"""
    if admin is None or admin.artifact_name != ZEYPHR_ADMIN:
        raise ValueError(f"{ZEYPHR_MARKETPLACE} requires a deployed {ZEYPHR_ADMIN}.")
    return DeploymentSpec(
        artifact_name=ZEYPHR_MARKETPLACE,
        constructor_args=(admin.contract_address,),
        sender=sender,
    )


CONSTRUCTOR_PARAMETER_NAMES = {
    ZEYPHR_ADMIN: ("feePercent", "feeAccount"),
    ZEYPHR_MARKETPLACE: ("admin",),
}


class ContractReport(NamedTuple):
    name: str
    deployed: bool
    address: Optional[str] = None
    verified: bool = False
    verification: Optional[VerificationOutcome] = None
    note: Optional[str] = None


class PipelineReport(NamedTuple):
    network: str
    state: PipelineState
    contracts: typing.Tuple[ContractReport, ...]
    results: Dict[str, DeploymentResult]
    failed_stage: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.state == PipelineState.COMPLETE

    @property
    def warnings(self) -> List[str]:
        warnings = list()
        for contract in self.contracts:
            outcome = contract.verification
            if outcome is not None and not outcome.verified:
                warnings.append(f"{contract.name} verification failed: {outcome.reason}")
        return warnings

    def contract(self, name: str) -> ContractReport:
        for contract in self.contracts:
            if contract.name == name:
                return contract
        raise KeyError(name)

    def summary(self) -> str:
        lines = [f"Network: {self.network}", f"Status: {self.state.value}"]
        if self.failed_stage:
            lines.append(f"Failed stage: {self.failed_stage}")
            lines.append(f"Error: {self.error}")
        for contract in self.contracts:
            deployed = contract.address if contract.deployed else "not deployed"
            if contract.verification is not None:
                verification = str(contract.verification)
            else:
                verification = contract.note or "not attempted"
            lines.append(f"\t{contract.name}: {deployed}; verification: {verification}")
        for warning in self.warnings:
            lines.append(f"WARNING: {warning}")
        return "\n".join(lines)


class PipelineRun:
    """Mutable state of a single pipeline invocation."""

    def __init__(self, network_name: str):
        self.network_name = network_name
        self.state = PipelineState.START
        self.profile: Optional[NetworkProfile] = None
        self.verify: Optional[bool] = None
        self.results: Dict[str, DeploymentResult] = OrderedDict()
        self.outcomes: Dict[str, VerificationOutcome] = dict()
        self.failed_stage: Optional[str] = None
        self.error: Optional[Exception] = None

    def transition(self, state: PipelineState) -> None:
        if state not in TRANSITIONS[self.state]:
            raise InvalidTransition(f"Cannot transition from {self.state.value} to {state.value}")
        self.state = state

    def fail(self, stage: str, error: Exception) -> None:
        self.transition(PipelineState.FAILED)
        self.failed_stage = stage
        self.error = error
        print(f"\n(!) Deployment failed at stage '{stage}': {error}")
        for name, result in self.results.items():
            print(f"\t{name} was deployed at {result.contract_address}")

    def _skip_note(self) -> Optional[str]:
        if self.state == PipelineState.FAILED:
            return f"not attempted ({self.failed_stage} stage failed)"
        if self.verify is False:
            return "skipped (development network)"
        return None

    def report(self) -> PipelineReport:
        contracts = list()
        for name in CONTRACTS:
            result = self.results.get(name)
            outcome = self.outcomes.get(name)
            contracts.append(
                ContractReport(
                    name=name,
                    deployed=result is not None,
                    address=result.contract_address if result else None,
                    verified=outcome.verified if outcome else False,
                    verification=outcome,
                    note=None if outcome else self._skip_note(),
                )
            )
        return PipelineReport(
            network=self.network_name,
            state=self.state,
            contracts=tuple(contracts),
            results=dict(self.results),
            failed_stage=self.failed_stage,
            error=self.error,
        )


class DeploymentPipeline:
    """
    Deploys ZeyphrAdmin and ZeyphrMarketplace to a single network and verifies
    both on persistent networks.
    """

    def __init__(
        self,
        config: NetworkConfig,
        deployer: ContractDeployer,
        verifier: VerificationSubmitter,
        accounts: AccountResolver,
        autosign: bool = True,
    ):
        self.config = config
        self.deployer = deployer
        self.verifier = verifier
        self.accounts = accounts
        self.autosign = autosign

    def run(self, network_name: str) -> PipelineReport:
        run = PipelineRun(network_name)

        try:
            run.profile = self.config.resolve(network_name)
        except ValueError as e:  # UnknownNetwork or an empty name
            run.fail(STAGE_NETWORK, e)
            return run.report()
        run.verify = not self.config.is_development_network(run.profile.name)

        run.transition(PipelineState.ADMIN_DEPLOYING)
        try:
            sender = self.accounts.resolve(DEPLOYER_ROLE)
            fee_account = self.accounts.resolve_address(self.config.deployment.fee_account)
            spec = admin_spec(self.config.deployment, fee_account, sender)
            self._deploy(run, spec)
        except DeploymentError as e:
            run.fail(STAGE_ADMIN, e)
            return run.report()
        run.transition(PipelineState.ADMIN_DEPLOYED)

        run.transition(PipelineState.MARKETPLACE_DEPLOYING)
        try:
            spec = marketplace_spec(run.results[ZEYPHR_ADMIN], sender)
            self._deploy(run, spec)
        except DeploymentError as e:
            run.fail(STAGE_MARKETPLACE, e)
            return run.report()
        run.transition(PipelineState.MARKETPLACE_DEPLOYED)

        if not run.verify:
            print(f"\n(i) {network_name} is a development network; skipping verification")
            run.transition(PipelineState.COMPLETE)
            return run.report()

        run.transition(PipelineState.VERIFYING)
        try:
            self._verify(run)
        except MissingExplorerConfig as e:
            run.fail(STAGE_VERIFICATION, e)
            return run.report()
        run.transition(PipelineState.COMPLETE)
        return run.report()

    def _deploy(self, run: PipelineRun, spec: DeploymentSpec) -> DeploymentResult:
        if not self.autosign:
            names = CONSTRUCTOR_PARAMETER_NAMES[spec.artifact_name]
            _confirm_resolution(OrderedDict(zip(names, spec.constructor_args)), spec.artifact_name)
        result = self.deployer.deploy(spec, run.profile)
        run.results[spec.artifact_name] = result
        return result

    def _verify(self, run: PipelineRun) -> None:
        for name in CONTRACTS:
            request = VerificationRequest.from_result(run.results[name])
            try:
                outcome = self.verifier.verify_request(request, run.profile)
            except MissingExplorerConfig:
                raise
            except Exception as e:
                # the contracts are already deployed; verification errors only degrade the report
                outcome = VerificationOutcome(VerificationStatus.FAILED, f"{type(e).__name__}: {e}")
            run.outcomes[name] = outcome
            if not outcome.verified:
                print(f"WARNING: {name} verification failed: {outcome.reason}")
