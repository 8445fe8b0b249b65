import os
import typing
from typing import Any, List, Sequence

from ape import networks, project
from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.contracts import ContractContainer, ContractInstance
from ape.exceptions import ApeException
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from web3.auto import w3

from accountable_deployment.backend import DeployerBackend
from accountable_deployment.constants import RPC_URL_ENVVARS
from accountable_deployment.errors import (
    DeployError,
    NetworkConfigError,
    UnitNotFound,
    VerifyError,
)
from accountable_deployment.networks import NetworkConfig
from accountable_deployment.types import ABI, ChainId, DeployedUnit, UnitName


def _get_dependency_contract_container(unit_name: UnitName) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise DeployError(f"Ambiguous {dependency_name} dependency", unit_name=unit_name)
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, unit_name)
            return contract_container
        except AttributeError:
            continue
    raise UnitNotFound(f"No contract found with name '{unit_name}'.", unit_name=unit_name)


def get_contract_container(unit_name: UnitName) -> ContractContainer:
    try:
        contract_container = getattr(project, unit_name)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(unit_name)

    return contract_container


def _get_abi(contract_instance: ContractInstance) -> ABI:
    """Returns the ABI of a contract instance as plain JSON-compatible data."""
    contract_abi = list()
    for entry in contract_instance.contract_type.abi:
        contract_abi.append(entry.model_dump(mode="json", by_alias=True))
    return contract_abi


def _validate_constructor_arguments(
    unit_name: UnitName, abi_inputs: List[Any], arguments: Sequence[Any]
) -> None:
    """Validates the argument vector against the constructor ABI."""
    if len(arguments) != len(abi_inputs):
        raise DeployError(
            f"Constructor parameters length mismatch - "
            f"{unit_name} ABI requires {len(abi_inputs)}, Got {len(arguments)}.",
            unit_name=unit_name,
        )

    for position, (abi_input, value) in enumerate(zip(abi_inputs, arguments)):
        if not w3.is_encodable(abi_input.type, value):
            raise DeployError(
                f"Constructor param '{abi_input.name}' at position {position} has a value "
                f"'{value}' whose type does not match expected ABI type '{abi_input.type}'",
                unit_name=unit_name,
            )


class ApeDeployer(DeployerBackend):
    """Deploys, verifies and looks up units through the connected ape provider."""

    def __init__(self, account: typing.Optional[AccountAPI] = None, autosign: bool = False):
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._account = None
        if account is not None:
            self._set_account(account)

    def _set_account(self, account: AccountAPI) -> None:
        self._account = account
        self._account.set_autosign(self._autosign)

    def get_account(self) -> AccountAPI:
        """Returns the deployer account, asking the user to pick one on first use."""
        if self._account is None:
            self._set_account(select_account())
        return self._account

    @property
    def chain_id(self) -> ChainId:
        return networks.provider.network.chain_id

    def deploy(
        self, unit_name: UnitName, arguments: Sequence[Any], confirmations: int
    ) -> DeployedUnit:
        try:
            container = get_contract_container(unit_name)
        except UnitNotFound as e:
            raise DeployError(str(e), unit_name=unit_name) from e
        _validate_constructor_arguments(
            unit_name=unit_name,
            abi_inputs=container.constructor.abi.inputs,
            arguments=arguments,
        )

        try:
            instance = self.get_account().deploy(
                container,
                *arguments,
                required_confirmations=confirmations,
                publish=False,
            )
        except ApeException as e:
            raise DeployError(f"Deployment transaction failed: {e}", unit_name=unit_name) from e

        return DeployedUnit(address=to_checksum_address(instance.address), abi=_get_abi(instance))

    def verify(self, address: ChecksumAddress, arguments: Sequence[Any]) -> None:
        # the explorer plugin recovers constructor arguments from the creation transaction
        explorer = networks.provider.network.explorer
        if explorer is None:
            raise VerifyError(
                f"No explorer plugin available for {networks.provider.network.name}"
            )
        try:
            explorer.publish_contract(address)
        except ApeException as e:
            raise VerifyError(f"Explorer rejected {address}: {e}") from e

    def get_deployed_instance(self, unit_name: UnitName) -> DeployedUnit:
        container = get_contract_container(unit_name)
        contract_instances = container.deployments
        if not contract_instances:
            raise UnitNotFound(
                f"{unit_name} has not been deployed on chain {self.chain_id}",
                unit_name=unit_name,
            )
        contract_instance = contract_instances[-1]  # latest deployment wins
        return DeployedUnit(
            address=to_checksum_address(contract_instance.address),
            abi=_get_abi(contract_instance),
        )

    def print_deployment_info(self, params_filepath, chain_id: ChainId, verify: bool) -> None:
        print(
            f"Account: {self.get_account().address}",
            f"Params: {params_filepath}",
            f"Verify: {verify}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {chain_id}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )


def check_explorer_plugin() -> None:
    """Checks that the ape-etherscan plugin is installed."""
    try:
        import ape_etherscan  # noqa: F401
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to verify contracts.")


def check_rpc_url(network: NetworkConfig) -> None:
    """
    Checks that the RPC endpoint environment variable read by ape-config.yaml
    is set when connecting to a public network through the node provider.
    """
    if network.is_development:
        return  # unnecessary for local deployment
    if networks.provider.name != "node":
        return  # unnecessary when using a hosted provider plugin
    envvar = RPC_URL_ENVVARS.get(network.name)
    if envvar and not os.environ.get(envvar):
        raise NetworkConfigError(f"{envvar} is not set.", chain_id=network.chain_id)
