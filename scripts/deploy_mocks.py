#!/usr/bin/python3
import click
from ape.cli import ConnectedProviderCommand, network_option
from dotenv import load_dotenv

from accountable_deployment.ape_backend import ApeDeployer
from accountable_deployment.networks import NetworkRegistry
from accountable_deployment.options import autosign_option, mocks_file_option
from accountable_deployment.orchestrator import DeploymentOrchestrator
from accountable_deployment.params import unit_specs_from_yaml

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@mocks_file_option
@autosign_option
def cli(network, mocks_file, autosign):
    """
    Deploys the mock tokens and price feed used on development networks.

    ape run deploy_mocks --network ethereum:local:test --autosign
    """
    specs = unit_specs_from_yaml(mocks_file)
    registry = NetworkRegistry.from_yaml()
    backend = ApeDeployer(autosign=autosign)

    orchestrator = DeploymentOrchestrator(registry=registry, backend=backend, autosign=autosign)
    orchestrator.deploy_mocks(specs, backend.chain_id)


if __name__ == "__main__":
    cli()
