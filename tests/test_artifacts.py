import json

import pytest

from accountable_deployment.artifacts import (
    ArtifactPaths,
    ArtifactSynchronizer,
    external_contracts_table,
    merge_addresses,
    merge_external_contracts,
    resolved_deployments_from_backend,
)
from accountable_deployment.errors import ArtifactSyncError, UnitNotFound
from accountable_deployment.networks import NetworkRegistry
from accountable_deployment.types import EXTERNAL_CONTRACTS, DependencyName, ResolvedDeployment
from accountable_deployment.utils import get_primary_unit

DEVELOPMENT_CHAIN_ID = 1337
PUBLIC_CHAIN_ID = 11155111
OTHER_PUBLIC_CHAIN_ID = 137

VAULT_ABI = [{"type": "function", "name": "deposit", "inputs": [], "outputs": []}]
KEEPER_ABI = [{"type": "function", "name": "performUpkeep", "inputs": [], "outputs": []}]


def _read(filepath):
    with open(filepath, "r", encoding="utf-8") as file:
        return json.load(file)


@pytest.fixture
def deployments(address):
    def _deployments(chain_id):
        return [
            ResolvedDeployment("Vault", chain_id, address("1"), VAULT_ABI),
            ResolvedDeployment("Keeper", chain_id, address("2"), KEEPER_ABI),
        ]

    return _deployments


def test_sync_creates_files(synchronizer, artifact_paths, deployments, address):
    synchronizer.sync(deployments(PUBLIC_CHAIN_ID), PUBLIC_CHAIN_ID)

    assert _read(artifact_paths.contracts) == {str(PUBLIC_CHAIN_ID): [address("1"), address("2")]}
    assert _read(artifact_paths.abi) == VAULT_ABI
    assert _read(artifact_paths.abis) == {"Vault": VAULT_ABI, "Keeper": KEEPER_ABI}
    assert _read(artifact_paths.external_contracts) == {
        str(PUBLIC_CHAIN_ID): {
            "linkToken": address("f"),
            "keeperRegistrar": address("5"),
            "keeperRegistry": address("4"),
            "cronUpKeepFactory": address("6"),
        }
    }
    # temporary files never outlive a write
    assert not list(artifact_paths.contracts.parent.glob("*.temp.json"))


def test_sync_is_idempotent(synchronizer, artifact_paths, deployments):
    synchronizer.sync(deployments(PUBLIC_CHAIN_ID), PUBLIC_CHAIN_ID)
    first = {path: path.read_text() for path in artifact_paths}

    synchronizer.sync(deployments(PUBLIC_CHAIN_ID), PUBLIC_CHAIN_ID)
    second = {path: path.read_text() for path in artifact_paths}

    assert first == second
    addresses = _read(artifact_paths.contracts)[str(PUBLIC_CHAIN_ID)]
    assert len(addresses) == len(set(addresses)) == 2


def test_sync_appends_new_addresses(synchronizer, artifact_paths, deployments, address):
    synchronizer.sync(deployments(PUBLIC_CHAIN_ID), PUBLIC_CHAIN_ID)
    redeployed = ResolvedDeployment("Vault", PUBLIC_CHAIN_ID, address("3"), VAULT_ABI)
    synchronizer.sync([redeployed], PUBLIC_CHAIN_ID)

    assert _read(artifact_paths.contracts)[str(PUBLIC_CHAIN_ID)] == [
        address("1"),
        address("2"),
        address("3"),
    ]


def test_sync_is_order_independent_across_networks(
    registry, tmp_path, deployments, address
):
    def _sync_in_order(directory, chain_ids):
        paths = ArtifactPaths.from_dir(directory)
        synchronizer = ArtifactSynchronizer(
            registry=registry, paths=paths, enabled=True, primary_unit="Vault"
        )
        for chain_id in chain_ids:
            synchronizer.sync(deployments(chain_id), chain_id)
        return {path.name: path.read_text() for path in paths}

    forward = _sync_in_order(tmp_path / "forward", [PUBLIC_CHAIN_ID, OTHER_PUBLIC_CHAIN_ID])
    backward = _sync_in_order(tmp_path / "backward", [OTHER_PUBLIC_CHAIN_ID, PUBLIC_CHAIN_ID])
    assert forward == backward


def test_disabled_sync_touches_nothing(registry, tmp_path, deployments, monkeypatch):
    directory = tmp_path / "constants"
    synchronizer = ArtifactSynchronizer(
        registry=registry, paths=ArtifactPaths.from_dir(directory), enabled=False
    )

    def _no_file_access(*args, **kwargs):
        raise AssertionError("file accessed while synchronization is disabled")

    monkeypatch.setattr("builtins.open", _no_file_access)
    synchronizer.sync(deployments(PUBLIC_CHAIN_ID), PUBLIC_CHAIN_ID)
    monkeypatch.undo()

    assert not directory.exists()


def test_existing_content_is_preserved(synchronizer, artifact_paths, deployments, address):
    artifact_paths.contracts.parent.mkdir(parents=True)
    artifact_paths.contracts.write_text(json.dumps({"1": [address("9")]}))
    artifact_paths.external_contracts.write_text(
        json.dumps({str(PUBLIC_CHAIN_ID): {"linkToken": address("8")}})
    )
    artifact_paths.abis.write_text(json.dumps({"Other": [], "Vault": []}))

    synchronizer.sync(deployments(PUBLIC_CHAIN_ID), PUBLIC_CHAIN_ID)

    assert _read(artifact_paths.contracts) == {
        "1": [address("9")],
        str(PUBLIC_CHAIN_ID): [address("1"), address("2")],
    }
    external = _read(artifact_paths.external_contracts)[str(PUBLIC_CHAIN_ID)]
    assert external["linkToken"] == address("8")  # never overwritten
    assert external["keeperRegistry"] == address("4")  # missing keys filled in
    assert _read(artifact_paths.abis) == {"Other": [], "Vault": VAULT_ABI, "Keeper": KEEPER_ABI}


def test_development_external_table(registry, address):
    network = registry.lookup(DEVELOPMENT_CHAIN_ID)
    table = external_contracts_table(network)
    assert table == {
        "linkToken": network.address_of(DependencyName.LINK_TOKEN),
        "keeperRegistrar": address("5"),
        "keeperRegistry": address("4"),
        "cronUpKeepFactory": address("6"),
    }


@pytest.mark.parametrize("chain_id", [1337, 31337])
def test_bundled_development_networks_publish_every_external_contract(tmp_path, chain_id):
    synchronizer = ArtifactSynchronizer(
        registry=NetworkRegistry.from_yaml(),
        paths=ArtifactPaths.from_dir(tmp_path),
        enabled=True,
    )
    synchronizer.sync([], chain_id)

    external = _read(synchronizer.paths.external_contracts)[str(chain_id)]
    assert set(external) == {dependency.value for dependency in EXTERNAL_CONTRACTS}


def test_primary_abi_only_written_for_primary_unit(registry, artifact_paths, address):
    synchronizer = ArtifactSynchronizer(
        registry=registry, paths=artifact_paths, enabled=True, primary_unit="Factory"
    )
    keeper = ResolvedDeployment("Keeper", PUBLIC_CHAIN_ID, address("2"), KEEPER_ABI)
    synchronizer.sync([keeper], PUBLIC_CHAIN_ID)
    assert not artifact_paths.abi.exists()
    assert _read(artifact_paths.abis) == {"Keeper": KEEPER_ABI}


def test_merge_addresses_ignores_case(address):
    data = {"1": [address("a").lower()]}
    merge_addresses(data, 1, [address("a"), address("b")])
    assert data == {"1": [address("a").lower(), address("b")]}


def test_merge_rejects_malformed_entries(address):
    with pytest.raises(ArtifactSyncError):
        merge_addresses({"1": address("a")}, 1, [address("b")])
    with pytest.raises(ArtifactSyncError):
        merge_addresses({"1": [address("a"), None]}, 1, [address("b")])
    with pytest.raises(ArtifactSyncError):
        merge_addresses({"1": [42]}, 1, [address("b")])
    with pytest.raises(ArtifactSyncError):
        merge_external_contracts({"1": [address("a")]}, 1, {"linkToken": address("b")})


def test_corrupt_file_raises(synchronizer, artifact_paths, deployments):
    artifact_paths.contracts.parent.mkdir(parents=True)
    artifact_paths.contracts.write_text("{not json")

    with pytest.raises(ArtifactSyncError) as error:
        synchronizer.sync(deployments(PUBLIC_CHAIN_ID), PUBLIC_CHAIN_ID)
    assert error.value.chain_id == PUBLIC_CHAIN_ID
    assert artifact_paths.contracts.read_text() == "{not json"


def test_non_object_file_raises(synchronizer, artifact_paths, deployments):
    artifact_paths.contracts.parent.mkdir(parents=True)
    artifact_paths.contracts.write_text("[]")
    with pytest.raises(ArtifactSyncError, match="Expected a JSON object"):
        synchronizer.sync(deployments(PUBLIC_CHAIN_ID), PUBLIC_CHAIN_ID)


def test_resolved_deployments_from_backend(backend, mocks):
    deployments = resolved_deployments_from_backend(
        backend, ["MockWethToken", "MockV3Aggregator"], DEVELOPMENT_CHAIN_ID
    )
    assert [(d.unit_name, d.address) for d in deployments] == [
        ("MockWethToken", mocks["MockWethToken"]),
        ("MockV3Aggregator", mocks["MockV3Aggregator"]),
    ]
    with pytest.raises(UnitNotFound):
        resolved_deployments_from_backend(backend, ["Vault"], DEVELOPMENT_CHAIN_ID)


def test_primary_unit_defaults_to_the_factory():
    assert get_primary_unit({"artifacts": {"dir": "constants"}}) == "AccountableFactory"
    assert get_primary_unit({}) == "AccountableFactory"
    assert get_primary_unit({"artifacts": {"primary": "Vault"}}) == "Vault"
