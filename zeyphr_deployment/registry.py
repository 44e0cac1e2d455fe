import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from zeyphr_deployment.constants import ARTIFACTS_DIR
from zeyphr_deployment.deployer import DeploymentResult
from zeyphr_deployment.utils import _load_json

ChainId = int
ContractName = str


STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """Represents a single entry in a contract registry."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: List[Dict[str, Any]]
    tx_hash: Optional[str]
    block_number: Optional[int]
    deployer: Optional[str]
    constructor_args: List[Any]


def registry_filepath_from_network(network_name: str) -> Path:
    return ARTIFACTS_DIR / f"{network_name}.json"


def _get_entry(chain_id: ChainId, result: DeploymentResult) -> RegistryEntry:
    return RegistryEntry(
        chain_id=chain_id,
        name=result.artifact_name,
        address=to_checksum_address(result.contract_address),
        abi=list(result.abi),
        tx_hash=result.tx_hash,
        block_number=result.block_number,
        deployer=result.deployer,
        constructor_args=list(result.constructor_args_used),
    )


def read_registry(filepath: Path) -> List[RegistryEntry]:
    data = _load_json(filepath)
    registry_entries = list()
    for chain_id, entries in data.items():
        for contract_name, artifacts in entries.items():
            registry_entry = RegistryEntry(
                chain_id=int(chain_id),
                name=contract_name,
                address=artifacts["address"],
                abi=artifacts.get("abi", []),
                tx_hash=artifacts.get("tx_hash"),
                block_number=artifacts.get("block_number"),
                deployer=artifacts.get("deployer"),
                constructor_args=artifacts.get("constructor_args", []),
            )
            registry_entries.append(registry_entry)
    return registry_entries


def write_registry(entries: List[RegistryEntry], filepath: Path, silent: bool = False) -> Path:
    """Writes a contract registry to a file."""

    if not entries:
        print("No entries provided.")
        return filepath

    # Sort registry entries to enforce common order
    entries = sorted(entries, key=lambda entry: (str(entry.chain_id), entry.name))

    data = defaultdict(dict)
    for entry in entries:
        entry_abi = list(entry.abi)
        entry_abi.sort(key=lambda d: (d["type"], d.get("name", "")))

        data[str(entry.chain_id)][entry.name] = {
            "address": entry.address,
            "abi": entry_abi,
            "tx_hash": entry.tx_hash,
            "block_number": int(entry.block_number) if entry.block_number is not None else None,
            "deployer": entry.deployer,
            "constructor_args": list(entry.constructor_args),
        }

    # Create the parent directory if it does not exist
    filepath.parent.mkdir(parents=True, exist_ok=True)

    # If the file already exists, attempt to merge the data, if not create a new file
    if filepath.exists():
        if not silent:
            print(f"Updating existing registry at {filepath}.")
        existing_data = _load_json(filepath)

        if any(chain_id in existing_data for chain_id in data):
            filepath = filepath.with_suffix(".unmerged.json")
            if not silent:
                print(
                    "Cannot merge registries with overlapping chain IDs.\n"
                    f"Writing to {filepath} to avoid overwriting existing data."
                )
        else:
            existing_data.update(data)
            data = existing_data
    elif not silent:
        print(f"Creating new registry at {filepath}.")

    with open(filepath, "w") as file:
        json.dump(data, file, **STANDARD_REGISTRY_JSON_FORMAT)

    return filepath


def registry_from_results(
    results: List[DeploymentResult], chain_id: ChainId, output_filepath: Path
) -> Path:
    """Creates a contract registry from the results of a deployment run."""
    entries = [_get_entry(chain_id=chain_id, result=result) for result in results]
    output_filepath = write_registry(entries=entries, filepath=output_filepath)
    print(f"(i) Registry written to {output_filepath}!")
    return output_filepath


def contracts_from_registry(filepath: Path, chain_id: ChainId) -> Dict[str, RegistryEntry]:
    """Returns the registry entries deployed on a single chain, by contract name."""
    deployments = dict()
    for registry_entry in read_registry(filepath=filepath):
        if registry_entry.chain_id != chain_id:
            continue
        deployments[registry_entry.name] = registry_entry
    return deployments
