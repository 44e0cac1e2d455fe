from collections import OrderedDict

from zeyphr_deployment.deployer import ZERO_ADDRESS
from zeyphr_deployment.exceptions import DeploymentAborted


def _confirm_deployment(contract_name: str) -> None:
    """Asks the user to confirm the deployment of a single contract."""
    answer = input(f"Deploy {contract_name} Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting deployment!")
        raise DeploymentAborted(f"Deployment of {contract_name} declined by operator.")


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting deployment!")
        raise DeploymentAborted("Deployment declined by operator.")


def _confirm_zero_address() -> None:
    answer = input("Zero Address detected for deployment parameter; Continue? Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting deployment!")
        raise DeploymentAborted("Zero address constructor parameter declined by operator.")


def _confirm_resolution(resolved_params: OrderedDict, contract_name: str) -> None:
    """Asks the user to confirm the resolved constructor parameters for a single contract."""
    if len(resolved_params) == 0:
        print(f"\n(i) No constructor parameters for {contract_name}")
        _confirm_deployment(contract_name)
        return

    print(f"\nConstructor parameters for {contract_name}")
    contains_zero_address = False
    for name, resolved_value in resolved_params.items():
        print(f"\t{name}={resolved_value}")
        if not contains_zero_address:
            contains_zero_address = str(resolved_value).lower() == ZERO_ADDRESS
    _confirm_deployment(contract_name)
    if contains_zero_address:
        _confirm_zero_address()
