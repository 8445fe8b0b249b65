#!/usr/bin/python3
from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, network_option
from dotenv import load_dotenv

from accountable_deployment.ape_backend import (
    ApeDeployer,
    check_explorer_plugin,
    check_rpc_url,
)
from accountable_deployment.artifacts import ArtifactPaths, ArtifactSynchronizer
from accountable_deployment.confirm import _continue
from accountable_deployment.networks import NetworkRegistry
from accountable_deployment.options import (
    autosign_option,
    etherscan_api_key_option,
    front_end_dir_option,
    params_file_option,
    update_front_end_option,
)
from accountable_deployment.orchestrator import DeploymentOrchestrator
from accountable_deployment.params import unit_specs_from_config
from accountable_deployment.utils import _load_yaml, get_front_end_dir, get_primary_unit
from accountable_deployment.verification import VerificationGate

load_dotenv()


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@params_file_option
@autosign_option
@update_front_end_option
@front_end_dir_option
@etherscan_api_key_option
def cli(network, params_file, autosign, update_front_end, front_end_dir, etherscan_api_key):
    """
    Deploys the contracts of a params file to the connected network.

    ape run deploy --network ethereum:sepolia:infura --params-file <params.yml>

    On development networks the mocks must be deployed first (ape run deploy_mocks).
    """
    config = _load_yaml(params_file)
    specs = unit_specs_from_config(config)
    registry = NetworkRegistry.from_yaml()

    backend = ApeDeployer(autosign=autosign)
    chain_id = backend.chain_id
    target = registry.lookup(chain_id)
    check_rpc_url(target)

    gate = VerificationGate(registry=registry, backend=backend, api_key=etherscan_api_key)
    verify = gate.should_verify(chain_id)
    if verify:
        check_explorer_plugin()

    synchronizer = ArtifactSynchronizer(
        registry=registry,
        paths=ArtifactPaths.from_dir(get_front_end_dir(config, override=front_end_dir)),
        enabled=update_front_end,
        primary_unit=get_primary_unit(config),
    )
    orchestrator = DeploymentOrchestrator(
        registry=registry,
        backend=backend,
        verification_gate=gate,
        synchronizer=synchronizer,
        autosign=autosign,
    )

    backend.print_deployment_info(Path(params_file), chain_id=chain_id, verify=verify)
    print(f"Network: {target.name} ({target.classification.value})")
    print(f"Confirmations: {target.confirmations}")
    print(f"Update front end: {update_front_end}")
    if not autosign:
        _continue()

    deployments = orchestrator.deploy_all(specs, chain_id)
    orchestrator.finalize(deployments, chain_id)

    for unit_name, outcome in orchestrator.verifications.items():
        print(f"(i) Verification of {unit_name}: {outcome.status.value}")


if __name__ == "__main__":
    cli()
