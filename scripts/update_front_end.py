#!/usr/bin/python3
import click
from ape.cli import ConnectedProviderCommand, network_option
from dotenv import load_dotenv

from accountable_deployment.ape_backend import ApeDeployer
from accountable_deployment.artifacts import (
    ArtifactPaths,
    ArtifactSynchronizer,
    resolved_deployments_from_backend,
)
from accountable_deployment.networks import NetworkRegistry
from accountable_deployment.options import (
    front_end_dir_option,
    params_file_option,
    unit_names_option,
)
from accountable_deployment.params import unit_specs_from_config
from accountable_deployment.utils import _load_yaml, get_front_end_dir, get_primary_unit

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@params_file_option
@front_end_dir_option
@unit_names_option
def cli(network, params_file, front_end_dir, unit_names):
    """Writes the addresses and ABIs of already deployed contracts to the front end."""
    config = _load_yaml(params_file)
    unit_names = unit_names or [spec.name for spec in unit_specs_from_config(config)]
    registry = NetworkRegistry.from_yaml()

    backend = ApeDeployer(autosign=False)
    chain_id = backend.chain_id
    deployments = resolved_deployments_from_backend(backend, unit_names, chain_id)

    synchronizer = ArtifactSynchronizer(
        registry=registry,
        paths=ArtifactPaths.from_dir(get_front_end_dir(config, override=front_end_dir)),
        enabled=True,
        primary_unit=get_primary_unit(config),
    )
    synchronizer.sync(deployments, chain_id)


if __name__ == "__main__":
    cli()
