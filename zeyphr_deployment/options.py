from pathlib import Path

import click

from zeyphr_deployment.types import FeeAccount, FeePercent

network_name_option = click.option(
    "--network-name",
    "-n",
    help="Name of the target network, as listed in the network configuration",
    type=click.STRING,
    required=True,
)

config_option = click.option(
    "--config",
    "-c",
    "config_filepath",
    help="Network configuration YAML; defaults to the bundled networks.yml",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)

account_alias_option = click.option(
    "--account-alias",
    "-a",
    help="Alias of the ape account used to deploy on live networks",
    type=click.STRING,
    required=False,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions and skip confirmation prompts",
    is_flag=True,
    default=False,
)

fee_percent_option = click.option(
    "--fee-percent",
    help="Marketplace fee percentage passed to ZeyphrAdmin",
    type=FeePercent(),
    required=False,
)

fee_account_option = click.option(
    "--fee-account",
    help="Named account or address collecting marketplace fees; defaults to the deployer",
    type=FeeAccount(),
    required=False,
)

registry_filepath_option = click.option(
    "--registry-filepath",
    "-f",
    help="Registry file to read from or write to; defaults to deployment/artifacts/<network>.json",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)

no_registry_option = click.option(
    "--no-registry",
    help="Do not write the deployment registry",
    is_flag=True,
    default=False,
)
