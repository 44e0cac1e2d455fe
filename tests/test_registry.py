import json

import pytest

from zeyphr_deployment.deployer import DeploymentResult
from zeyphr_deployment.registry import (
    RegistryEntry,
    contracts_from_registry,
    read_registry,
    registry_from_results,
    write_registry,
)

ADMIN_ADDRESS = "0x" + "12" * 20
MARKETPLACE_ADDRESS = "0x" + "34" * 20


@pytest.fixture
def results(deployer_address):
    admin = DeploymentResult(
        artifact_name="ZeyphrAdmin",
        contract_address=ADMIN_ADDRESS,
        constructor_args_used=(1, deployer_address),
        confirmations_observed=6,
        tx_hash="0x" + "aa" * 32,
        block_number=101,
        deployer=deployer_address,
        abi=[
            {"type": "function", "name": "feePercent", "inputs": []},
            {"type": "constructor", "inputs": []},
        ],
    )
    marketplace = DeploymentResult(
        artifact_name="ZeyphrMarketplace",
        contract_address=MARKETPLACE_ADDRESS,
        constructor_args_used=(ADMIN_ADDRESS,),
        confirmations_observed=6,
        tx_hash="0x" + "bb" * 32,
        block_number=102,
        deployer=deployer_address,
    )
    return [marketplace, admin]


def test_registry_from_results(tmp_path, results, deployer_address):
    filepath = tmp_path / "iota.json"
    output = registry_from_results(results, chain_id=1075, output_filepath=filepath)
    assert output == filepath

    with open(filepath) as file:
        data = json.load(file)
    assert list(data) == ["1075"]
    assert list(data["1075"]) == ["ZeyphrAdmin", "ZeyphrMarketplace"]

    admin = data["1075"]["ZeyphrAdmin"]
    assert admin["address"] == ADMIN_ADDRESS
    assert admin["block_number"] == 101
    assert admin["constructor_args"] == [1, deployer_address]
    # abi entries are sorted by type
    assert [item["type"] for item in admin["abi"]] == ["constructor", "function"]

    entries = read_registry(filepath)
    assert {entry.name for entry in entries} == {"ZeyphrAdmin", "ZeyphrMarketplace"}
    assert all(entry.chain_id == 1075 for entry in entries)


def test_merge_registries_of_different_chains(tmp_path, results):
    filepath = tmp_path / "registry.json"
    registry_from_results(results, chain_id=1075, output_filepath=filepath)
    output = registry_from_results(results, chain_id=31337, output_filepath=filepath)

    assert output == filepath
    chain_ids = {entry.chain_id for entry in read_registry(filepath)}
    assert chain_ids == {1075, 31337}


def test_overlapping_chain_ids_are_not_merged(tmp_path, results):
    filepath = tmp_path / "iota.json"
    registry_from_results(results, chain_id=1075, output_filepath=filepath)
    output = registry_from_results(results[:1], chain_id=1075, output_filepath=filepath)

    assert output == tmp_path / "iota.unmerged.json"
    assert len(read_registry(filepath)) == 2
    assert len(read_registry(output)) == 1


def test_write_empty_registry(tmp_path):
    filepath = tmp_path / "empty.json"
    assert write_registry([], filepath) == filepath
    assert not filepath.exists()


def test_contracts_from_registry(tmp_path, results, deployer_address):
    filepath = tmp_path / "registry.json"
    registry_from_results(results, chain_id=1075, output_filepath=filepath)
    registry_from_results(results[:1], chain_id=31337, output_filepath=filepath)

    deployments = contracts_from_registry(filepath, chain_id=1075)
    assert set(deployments) == {"ZeyphrAdmin", "ZeyphrMarketplace"}

    admin = deployments["ZeyphrAdmin"]
    assert isinstance(admin, RegistryEntry)
    assert admin.address == ADMIN_ADDRESS
    # constructor arguments keep their types for re-verification
    assert admin.constructor_args == [1, deployer_address]

    assert set(contracts_from_registry(filepath, chain_id=31337)) == {"ZeyphrMarketplace"}
    assert contracts_from_registry(filepath, chain_id=5) == {}
