"""Exception classes raised while deploying and verifying the Zeyphr contracts."""


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class NetworkConfigError(DeploymentError, ValueError):
    """Raised when the network configuration table is malformed."""

    pass


class UnknownNetwork(DeploymentError, ValueError):
    """Raised when no network profile is registered for the requested network."""

    def __init__(self, network_name: str):
        self.network_name = network_name
        super().__init__(f"No network profile registered for '{network_name}'.")


class ContractDeploymentError(DeploymentError):
    """Base exception for failures of a single contract deployment."""

    def __init__(self, artifact_name: str, reason: str):
        self.artifact_name = artifact_name
        self.reason = reason
        super().__init__(f"{artifact_name}: {reason}")


class DeploymentReverted(ContractDeploymentError):
    """Raised when the creation transaction was mined but reverted."""

    pass


class ConfirmationTimeout(ContractDeploymentError):
    """Raised when the required confirmations were not observed."""

    pass


class MissingExplorerConfig(DeploymentError, ValueError):
    """Raised when verification is requested on a network without an explorer API URL."""

    def __init__(self, network_name: str):
        self.network_name = network_name
        super().__init__(
            f"Network '{network_name}' is not a development network "
            f"but has no explorer API URL configured."
        )


class ExplorerError(DeploymentError):
    """Raised by explorer clients when the explorer rejects a verification request."""

    pass


class InvalidTransition(DeploymentError, RuntimeError):
    """Raised when the pipeline attempts an undeclared state transition."""

    pass


class AccountResolutionError(DeploymentError, ValueError):
    """Raised when a named account role cannot be resolved to a signing account."""

    pass


class DeploymentAborted(DeploymentError):
    """Raised when the operator declines a deployment prompt."""

    pass


class UnknownArtifact(ContractDeploymentError):
    """Raised when no compiled artifact exists for a contract name."""

    pass
