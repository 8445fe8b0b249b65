from typing import Iterable, List

from eth_typing import ChecksumAddress

from accountable_deployment.backend import DeployerBackend
from accountable_deployment.errors import MissingDependencyAddress, UnitNotFound
from accountable_deployment.networks import NetworkConfig, NetworkRegistry
from accountable_deployment.types import ChainId, DependencyName


class DependencyResolver:
    """
    Resolves named dependencies to addresses on a given network.

    Development networks resolve through locally deployed mocks: each token has
    its own mock, while every price feed resolves to the one shared aggregator
    mock regardless of the asset it prices. Public networks read the address
    straight from the network's dependency table and never touch the backend.
    """

    def __init__(self, registry: NetworkRegistry, backend: DeployerBackend):
        self.registry = registry
        self.backend = backend

    def resolve(
        self, chain_id: ChainId, dependency_names: Iterable[DependencyName]
    ) -> List[ChecksumAddress]:
        # fail on a bad name before doing any lookups
        dependencies = [DependencyName.from_name(name) for name in dependency_names]
        network = self.registry.lookup(chain_id)
        return [self._resolve_dependency(network, dependency) for dependency in dependencies]

    def _resolve_dependency(
        self, network: NetworkConfig, dependency: DependencyName
    ) -> ChecksumAddress:
        mock_unit_name = dependency.mock_unit_name
        if network.is_development and mock_unit_name:
            return self._resolve_mock(network, dependency, mock_unit_name)

        address = network.address_of(dependency)
        if not address:
            raise MissingDependencyAddress(
                f"No address configured for '{dependency.value}' on {network.name}",
                chain_id=network.chain_id,
            )
        return address

    def _resolve_mock(
        self, network: NetworkConfig, dependency: DependencyName, mock_unit_name: str
    ) -> ChecksumAddress:
        try:
            instance = self.backend.get_deployed_instance(mock_unit_name)
        except UnitNotFound as e:
            raise MissingDependencyAddress(
                f"Mock {mock_unit_name} for '{dependency.value}' is not deployed on "
                f"{network.name}; deploy the mocks first",
                chain_id=network.chain_id,
            ) from e
        return instance.address
