from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, network_option
from dotenv import load_dotenv

from accountable_deployment.ape_backend import (
    ApeDeployer,
    check_explorer_plugin,
    check_rpc_url,
)
from accountable_deployment.networks import NetworkRegistry
from accountable_deployment.options import (
    etherscan_api_key_option,
    params_file_option,
    unit_names_option,
)
from accountable_deployment.params import unit_specs_from_yaml
from accountable_deployment.resolver import DependencyResolver
from accountable_deployment.types import ResolvedDeployment
from accountable_deployment.verification import VerificationGate, VerificationStatus

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@params_file_option
@unit_names_option
@etherscan_api_key_option
def cli(network, params_file: Path, unit_names, etherscan_api_key):
    """Verify deployed contracts on the network's block explorer."""
    specs = unit_specs_from_yaml(params_file)
    if unit_names:
        unknown = set(unit_names) - {spec.name for spec in specs}
        if unknown:
            raise click.BadOptionUsage(
                option_name="--contract-name",
                message=f"Not in {params_file}: {', '.join(sorted(unknown))}",
            )
        specs = [spec for spec in specs if spec.name in unit_names]

    registry = NetworkRegistry.from_yaml()
    backend = ApeDeployer(autosign=False)
    chain_id = backend.chain_id
    check_rpc_url(registry.lookup(chain_id))
    resolver = DependencyResolver(registry=registry, backend=backend)
    gate = VerificationGate(registry=registry, backend=backend, api_key=etherscan_api_key)
    if not gate.should_verify(chain_id):
        print(f"(i) Verification skipped for chain {chain_id}.")
        return
    check_explorer_plugin()

    failures = 0
    for spec in specs:
        deployed = backend.get_deployed_instance(spec.name)
        arguments = spec.arguments(resolver.resolve(chain_id, spec.dependencies))
        resolved = ResolvedDeployment(
            unit_name=spec.name,
            chain_id=chain_id,
            address=deployed.address,
            abi=deployed.abi,
            arguments=tuple(arguments),
        )
        outcome = gate.maybe_verify(resolved, chain_id, arguments)
        if outcome.status == VerificationStatus.FAILED:
            failures += 1
    if failures:
        print(f"(!) {failures} contract(s) failed verification.")


if __name__ == "__main__":
    cli()
