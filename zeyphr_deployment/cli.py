import sys
from contextlib import nullcontext

import click
from ape import accounts, networks

from zeyphr_deployment.chain import ApeAccountResolver, ApeChainClient
from zeyphr_deployment.confirm import _continue
from zeyphr_deployment.constants import DEPLOYER_ROLE
from zeyphr_deployment.deployer import ContractDeployer
from zeyphr_deployment.exceptions import (
    DeploymentAborted,
    MissingExplorerConfig,
    UnknownNetwork,
)
from zeyphr_deployment.explorer import ApeExplorerClient, export_explorer_api_key
from zeyphr_deployment.networks import NetworkConfig, NetworkProfile
from zeyphr_deployment.options import (
    account_alias_option,
    autosign_option,
    config_option,
    fee_account_option,
    fee_percent_option,
    network_name_option,
    no_registry_option,
    registry_filepath_option,
)
from zeyphr_deployment.pipeline import CONTRACTS, DeploymentPipeline
from zeyphr_deployment.registry import (
    contracts_from_registry,
    registry_filepath_from_network,
    registry_from_results,
)
from zeyphr_deployment.utils import load_environment
from zeyphr_deployment.verify import VerificationSubmitter


def _load_config(config_filepath) -> NetworkConfig:
    load_environment()
    return NetworkConfig.from_yaml(config_filepath)


def _provider_context(config: NetworkConfig, network_name: str):
    try:
        profile = config.resolve(network_name)
    except ValueError:
        # nothing to connect to; the pipeline reports the unknown network
        return nullcontext()
    provider_settings = {"uri": profile.rpc_url} if profile.rpc_url else {}
    return networks.parse_network_choice(profile.ape_network, provider_settings=provider_settings)


def _check_explorer_config(config: NetworkConfig, profile: NetworkProfile) -> None:
    """Fails before any deployment when a persistent network cannot be verified."""
    if config.is_development_network(profile.name):
        return  # unnecessary for local deployment
    if not profile.explorer_api_url:
        raise MissingExplorerConfig(profile.name)


def _print_deployment_info(config: NetworkConfig, profile: NetworkProfile, account_alias) -> None:
    if config.is_development_network(profile.name):
        account = f"test account #{config.named_accounts.get(DEPLOYER_ROLE)}"
    else:
        account = account_alias or "(selected interactively)"
    print(
        f"Account: {account}",
        f"Network: {profile.name}",
        f"Ape network: {profile.ape_network}",
        f"Chain ID: {profile.chain_id}",
        f"Required confirmations: {profile.required_confirmations}",
        f"Verify: {not config.is_development_network(profile.name)}",
        f"Explorer: {profile.explorer_browser_url or profile.explorer_api_url or '-'}",
        f"Fee percent: {config.deployment.fee_percent}",
        f"Fee account: {config.deployment.fee_account}",
        sep="\n",
    )


def _verification_submitter() -> VerificationSubmitter:
    return VerificationSubmitter(ApeExplorerClient())


@click.command()
@network_name_option
@config_option
@account_alias_option
@autosign_option
@fee_percent_option
@fee_account_option
@registry_filepath_option
@no_registry_option
def deploy(
    network_name,
    config_filepath,
    account_alias,
    autosign,
    fee_percent,
    fee_account,
    registry_filepath,
    no_registry,
):
    """Deploy ZeyphrAdmin and ZeyphrMarketplace, then verify them on live networks."""
    config = _load_config(config_filepath)
    config = config.with_deployment(fee_percent=fee_percent, fee_account=fee_account)

    if network_name in config.profiles:
        profile = config.resolve(network_name)
        try:
            _check_explorer_config(config, profile)
        except MissingExplorerConfig as e:
            click.secho(f"Error: {e}", fg="red", err=True)
            sys.exit(1)
        _print_deployment_info(config, profile, account_alias)
        export_explorer_api_key(profile)

    account = accounts.load(account_alias) if account_alias else None
    pipeline = DeploymentPipeline(
        config=config,
        deployer=ContractDeployer(ApeChainClient()),
        verifier=_verification_submitter(),
        accounts=ApeAccountResolver(config, network_name, account=account, autosign=autosign),
        autosign=autosign,
    )

    try:
        with _provider_context(config, network_name):
            if not autosign and network_name in config.profiles:
                _continue()
            report = pipeline.run(network_name)
    except DeploymentAborted as e:
        click.secho(f"Aborted: {e}", fg="yellow", err=True)
        sys.exit(1)

    click.echo("\n" + report.summary())

    if not report.succeeded:
        sys.exit(1)

    if not no_registry:
        profile = config.resolve(network_name)
        registry_from_results(
            results=list(report.results.values()),
            chain_id=profile.chain_id,
            output_filepath=registry_filepath or registry_filepath_from_network(network_name),
        )


@click.command()
@network_name_option
@config_option
@registry_filepath_option
def verify(network_name, config_filepath, registry_filepath):
    """Re-submit registered Zeyphr contracts for explorer verification."""
    config = _load_config(config_filepath)
    try:
        profile = config.resolve(network_name)
    except UnknownNetwork as e:
        raise click.BadParameter(str(e), param_hint="--network-name")
    if config.is_development_network(profile.name):
        raise click.BadParameter(
            f"{network_name} is a development network; nothing to verify.",
            param_hint="--network-name",
        )

    registry_filepath = registry_filepath or registry_filepath_from_network(network_name)
    if not registry_filepath.exists():
        raise click.FileError(str(registry_filepath), hint="no registry for this network")
    deployments = contracts_from_registry(registry_filepath, chain_id=profile.chain_id)

    export_explorer_api_key(profile)
    submitter = _verification_submitter()
    all_verified = True
    with _provider_context(config, network_name):
        for contract_name in CONTRACTS:
            entry = deployments.get(contract_name)
            if entry is None:
                click.echo(f"{contract_name}: not found in {registry_filepath}")
                all_verified = False
                continue
            try:
                outcome = submitter.verify(
                    entry.address, entry.constructor_args, profile, contract_name=contract_name
                )
            except MissingExplorerConfig as e:
                click.secho(f"Error: {e}", fg="red", err=True)
                sys.exit(1)
            click.echo(f"{contract_name} ({entry.address}): {outcome}")
            all_verified = all_verified and outcome.verified

    if not all_verified:
        sys.exit(1)
