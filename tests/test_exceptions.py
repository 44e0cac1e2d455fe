"""Unit tests for the deployment exception hierarchy."""

import pytest

from zeyphr_deployment.exceptions import (
    AccountResolutionError,
    ConfirmationTimeout,
    ContractDeploymentError,
    DeploymentAborted,
    DeploymentError,
    DeploymentReverted,
    ExplorerError,
    InvalidTransition,
    MissingExplorerConfig,
    NetworkConfigError,
    UnknownArtifact,
    UnknownNetwork,
)


class TestExceptionCatching:
    """Test that exceptions can be caught as their base types."""

    def test_catch_unknown_network_as_value_error(self):
        with pytest.raises(ValueError):
            raise UnknownNetwork("sepolia")

    def test_catch_missing_explorer_config_as_value_error(self):
        with pytest.raises(ValueError):
            raise MissingExplorerConfig("iota")

    def test_catch_invalid_transition_as_runtime_error(self):
        with pytest.raises(RuntimeError):
            raise InvalidTransition("complete -> admin-deploying")

    def test_catch_contract_failures_as_contract_deployment_error(self):
        for exc in (
            DeploymentReverted("ZeyphrAdmin", "reverted"),
            ConfirmationTimeout("ZeyphrAdmin", "timed out"),
            UnknownArtifact("ZeyphrAdmin", "not compiled"),
        ):
            with pytest.raises(ContractDeploymentError):
                raise exc

    def test_catch_all_as_deployment_error(self):
        """Test that all custom exceptions can be caught as DeploymentError."""
        exceptions = [
            NetworkConfigError("test"),
            UnknownNetwork("test"),
            DeploymentReverted("test", "test"),
            ConfirmationTimeout("test", "test"),
            UnknownArtifact("test", "test"),
            MissingExplorerConfig("test"),
            ExplorerError("test"),
            InvalidTransition("test"),
            AccountResolutionError("test"),
            DeploymentAborted("test"),
        ]

        for exc in exceptions:
            with pytest.raises(DeploymentError):
                raise exc


class TestExceptionMessages:
    def test_unknown_network(self):
        error = UnknownNetwork("sepolia")
        assert error.network_name == "sepolia"
        assert str(error) == "No network profile registered for 'sepolia'."

    def test_contract_deployment_error(self):
        error = DeploymentReverted("ZeyphrMarketplace", "execution reverted")
        assert error.artifact_name == "ZeyphrMarketplace"
        assert error.reason == "execution reverted"
        assert str(error) == "ZeyphrMarketplace: execution reverted"

    def test_missing_explorer_config(self):
        error = MissingExplorerConfig("iota")
        assert error.network_name == "iota"
        assert "iota" in str(error)
