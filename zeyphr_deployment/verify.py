import typing
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, NamedTuple, Optional

import requests

from zeyphr_deployment.deployer import DeploymentResult
from zeyphr_deployment.exceptions import ExplorerError, MissingExplorerConfig
from zeyphr_deployment.networks import NetworkProfile

ALREADY_VERIFIED_MARKER = "already verified"


class VerificationStatus(Enum):
    VERIFIED = "verified"
    ALREADY_VERIFIED = "already-verified"
    FAILED = "failed"


class VerificationOutcome(NamedTuple):
    status: VerificationStatus
    reason: Optional[str] = None

    @property
    def verified(self) -> bool:
        return self.status in (VerificationStatus.VERIFIED, VerificationStatus.ALREADY_VERIFIED)

    def __str__(self) -> str:
        if self.reason:
            return f"{self.status.value} ({self.reason})"
        return self.status.value


class VerificationRequest(NamedTuple):
    contract_name: str
    contract_address: str
    constructor_args_used: typing.Tuple[Any, ...]

    @classmethod
    def from_result(cls, result: DeploymentResult) -> "VerificationRequest":
        return cls(
            contract_name=result.artifact_name,
            contract_address=result.contract_address,
            constructor_args_used=tuple(result.constructor_args_used),
        )


class ExplorerClient(ABC):
    """Publishes contract sources to a block explorer."""

    @abstractmethod
    def submit(
        self,
        contract_name: str,
        contract_address: str,
        constructor_args: typing.Sequence[Any],
        profile: NetworkProfile,
    ) -> str:
        """
        Submits a verification request and returns the explorer's final message.
        Raises ExplorerError when the explorer rejects the request.
        """
        raise NotImplementedError


def _is_already_verified(message: str) -> bool:
    return ALREADY_VERIFIED_MARKER in message.lower()


class VerificationSubmitter:
    """
    Submits deployed contracts for explorer verification.

    Does not decide whether verification makes sense for a network;
    callers must not use it on development networks.
    """

    def __init__(self, client: ExplorerClient):
        self.client = client

    def verify(
        self,
        address: str,
        constructor_args: typing.Sequence[Any],
        profile: NetworkProfile,
        contract_name: str,
    ) -> VerificationOutcome:
        if not profile.explorer_api_url:
            raise MissingExplorerConfig(profile.name)

        print(f"(i) Verifying {contract_name} at {address} with {profile.explorer_api_url}...")
        try:
            message = self.client.submit(contract_name, address, tuple(constructor_args), profile)
        except ExplorerError as e:
            reason = str(e)
            if _is_already_verified(reason):
                return VerificationOutcome(VerificationStatus.ALREADY_VERIFIED, reason)
            return VerificationOutcome(VerificationStatus.FAILED, reason)
        except requests.RequestException as e:
            return VerificationOutcome(VerificationStatus.FAILED, f"explorer unreachable: {e}")

        if _is_already_verified(message):
            return VerificationOutcome(VerificationStatus.ALREADY_VERIFIED, message)
        return VerificationOutcome(VerificationStatus.VERIFIED, message)

    def verify_request(
        self, request: VerificationRequest, profile: NetworkProfile
    ) -> VerificationOutcome:
        return self.verify(
            request.contract_address,
            request.constructor_args_used,
            profile,
            contract_name=request.contract_name,
        )
