import json
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Sequence

from accountable_deployment.constants import (
    FRONT_END_ABI_FILENAME,
    FRONT_END_ABIS_FILENAME,
    FRONT_END_CONTRACTS_FILENAME,
    FRONT_END_EXTERNAL_CONTRACTS_FILENAME,
)
from accountable_deployment.errors import ArtifactSyncError
from accountable_deployment.networks import NetworkConfig, NetworkRegistry
from accountable_deployment.types import EXTERNAL_CONTRACTS, ChainId, ResolvedDeployment
from accountable_deployment.utils import _load_json, _write_json


class ArtifactPaths(NamedTuple):
    """Locations of the JSON files consumed by the front end."""

    contracts: Path
    abi: Path
    abis: Path
    external_contracts: Path

    @classmethod
    def from_dir(cls, directory: Path) -> "ArtifactPaths":
        directory = Path(directory)
        return cls(
            contracts=directory / FRONT_END_CONTRACTS_FILENAME,
            abi=directory / FRONT_END_ABI_FILENAME,
            abis=directory / FRONT_END_ABIS_FILENAME,
            external_contracts=directory / FRONT_END_EXTERNAL_CONTRACTS_FILENAME,
        )


def _read_mapping(filepath: Path) -> Dict:
    if not filepath.exists():
        print(f"Creating new artifact at {filepath}.")
        return dict()
    data = _load_json(filepath)
    if not isinstance(data, dict):
        raise ArtifactSyncError(f"Expected a JSON object in {filepath}")
    return data


def merge_addresses(data: Dict, chain_id: ChainId, addresses: Sequence[str]) -> Dict:
    """Appends each address to the chain's list unless it is already present."""
    key = str(chain_id)
    known = data.get(key)
    if known is None:
        known = data[key] = list()
    elif not isinstance(known, list) or not all(isinstance(a, str) for a in known):
        raise ArtifactSyncError(f"Malformed contract addresses entry for chain {key}")

    for address in addresses:
        if address.lower() not in {a.lower() for a in known}:
            known.append(address)
    return data


def merge_external_contracts(data: Dict, chain_id: ChainId, table: Dict[str, str]) -> Dict:
    """Adds the chain's external contracts table, filling in missing keys only."""
    key = str(chain_id)
    existing = data.get(key)
    if existing is None:
        data[key] = dict(table)
        return data
    if not isinstance(existing, dict):
        raise ArtifactSyncError(f"Malformed external contracts entry for chain {key}")
    for name, address in table.items():
        existing.setdefault(name, address)
    return data


def external_contracts_table(network: NetworkConfig) -> Dict[str, str]:
    table = OrderedDict()
    for dependency in EXTERNAL_CONTRACTS:
        address = network.address_of(dependency)
        if address:
            table[dependency.value] = address
    return table


class ArtifactSynchronizer:
    """
    Merges deployment facts into the front end's JSON files.

    Every file is read, merged in memory and rewritten whole. There is no
    locking: a single writer per set of files is assumed.
    """

    def __init__(
        self,
        registry: NetworkRegistry,
        paths: ArtifactPaths,
        enabled: bool = False,
        primary_unit: Optional[str] = None,
    ):
        self.registry = registry
        self.paths = paths
        self.enabled = enabled
        self.primary_unit = primary_unit

    def sync(self, resolved_set: Sequence[ResolvedDeployment], chain_id: ChainId) -> None:
        if not self.enabled:
            return

        network = self.registry.lookup(chain_id)
        print("Writing to front end...")
        try:
            self._sync_contracts(resolved_set, network)
            self._sync_abis(resolved_set)
            self._sync_external_contracts(network)
        except ArtifactSyncError as e:
            raise e.with_context(unit_name=None, chain_id=network.chain_id)
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactSyncError(
                f"Failed to synchronize front end artifacts: {e}", chain_id=network.chain_id
            ) from e
        print("Front end written!")

    def _sync_contracts(self, resolved_set: Sequence[ResolvedDeployment], network) -> None:
        data = _read_mapping(self.paths.contracts)
        addresses = [resolved.address for resolved in resolved_set]
        merge_addresses(data, network.chain_id, addresses)
        _write_json(data, self.paths.contracts)

    def _sync_abis(self, resolved_set: Sequence[ResolvedDeployment]) -> None:
        if not resolved_set:
            return
        store = _read_mapping(self.paths.abis)
        for resolved in resolved_set:
            store[resolved.unit_name] = resolved.abi  # last write wins
            if resolved.unit_name == self.primary_unit:
                _write_json(list(resolved.abi), self.paths.abi)
        _write_json(store, self.paths.abis)

    def _sync_external_contracts(self, network: NetworkConfig) -> None:
        data = _read_mapping(self.paths.external_contracts)
        merge_external_contracts(data, network.chain_id, external_contracts_table(network))
        _write_json(data, self.paths.external_contracts)


def resolved_deployments_from_backend(
    backend, unit_names: Sequence[str], chain_id: ChainId
) -> List[ResolvedDeployment]:
    """Rebuilds the deployment facts of units that are already deployed."""
    deployments = list()
    for unit_name in unit_names:
        deployed = backend.get_deployed_instance(unit_name)
        deployments.append(
            ResolvedDeployment(
                unit_name=unit_name,
                chain_id=chain_id,
                address=deployed.address,
                abi=deployed.abi,
            )
        )
    return deployments
