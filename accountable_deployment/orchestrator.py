import typing
from typing import Dict, List, Sequence

from accountable_deployment.backend import DeployerBackend
from accountable_deployment.confirm import _confirm_resolution
from accountable_deployment.errors import DeploymentConfigError, DeploymentError
from accountable_deployment.networks import NetworkConfig, NetworkRegistry
from accountable_deployment.params import DeployableUnitSpec
from accountable_deployment.resolver import DependencyResolver
from accountable_deployment.types import ChainId, ResolvedDeployment, UnitName
from accountable_deployment.verification import VerificationGate, VerificationOutcome


class DeploymentOrchestrator:
    """
    Deploys an ordered list of unit specs to one network, one unit at a time.

    Each unit's dependencies are resolved, its argument vector assembled in
    declaration order and the deployment awaited for the network's confirmation
    count before moving on. The first failure aborts the run; units already
    deployed stay deployed.
    """

    def __init__(
        self,
        registry: NetworkRegistry,
        backend: DeployerBackend,
        resolver: typing.Optional[DependencyResolver] = None,
        verification_gate: typing.Optional[VerificationGate] = None,
        synchronizer=None,
        autosign: bool = False,
    ):
        self.registry = registry
        self.backend = backend
        self.resolver = resolver or DependencyResolver(registry=registry, backend=backend)
        self.verification_gate = verification_gate
        self.synchronizer = synchronizer
        self.autosign = autosign
        self.verifications: Dict[UnitName, VerificationOutcome] = dict()

    def deploy_all(
        self, specs: Sequence[DeployableUnitSpec], chain_id: ChainId
    ) -> List[ResolvedDeployment]:
        network = self.registry.lookup(chain_id)
        self.registry.validate(specs, chain_ids=[network.chain_id])

        deployments = list()
        for spec in specs:
            try:
                resolved = self.deploy(spec, network)
            except DeploymentError as e:
                print(f"(!) Deployment of {spec.name} on {network.name} failed; aborting.")
                raise e.with_context(unit_name=spec.name, chain_id=network.chain_id)
            deployments.append(resolved)
        return deployments

    def deploy(self, spec: DeployableUnitSpec, network: NetworkConfig) -> ResolvedDeployment:
        addresses = self.resolver.resolve(network.chain_id, spec.dependencies)
        resolved_params = spec.resolve(addresses)
        arguments = list(resolved_params.values())

        print("----------------------------------------------------")
        print(f"Deploying {spec.name} and waiting for confirmations...")
        if not self.autosign:
            _confirm_resolution(resolved_params, spec.name)

        deployed = self.backend.deploy(spec.name, arguments, network.confirmations)
        print(f"(i) {spec.name} deployed at {deployed.address}")

        resolved = ResolvedDeployment(
            unit_name=spec.name,
            chain_id=network.chain_id,
            address=deployed.address,
            abi=deployed.abi,
            arguments=tuple(arguments),
        )
        if self.verification_gate is not None:
            outcome = self.verification_gate.maybe_verify(resolved, network.chain_id, arguments)
            self.verifications[spec.name] = outcome
        return resolved

    def deploy_mocks(
        self, specs: Sequence[DeployableUnitSpec], chain_id: ChainId
    ) -> List[ResolvedDeployment]:
        """Deploys mock dependencies; only ever on development networks."""
        network = self.registry.lookup(chain_id)
        if not network.is_development:
            raise DeploymentConfigError(
                f"Refusing to deploy mocks to public network {network.name}",
                chain_id=network.chain_id,
            )
        print(f"(i) Local network {network.name} detected! Deploying mocks...")
        deployments = self.deploy_all(specs, chain_id)
        print("(i) Mocks deployed!")
        return deployments

    def finalize(self, deployments: Sequence[ResolvedDeployment], chain_id: ChainId) -> None:
        """Publishes the completed deployments to the front end artifacts."""
        if self.synchronizer is not None:
            self.synchronizer.sync(deployments, chain_id)
