from collections import OrderedDict

import pytest
from eth_utils import to_checksum_address

from accountable_deployment.artifacts import ArtifactPaths, ArtifactSynchronizer
from accountable_deployment.backend import DeployerBackend
from accountable_deployment.errors import DeployError, UnitNotFound, VerifyError
from accountable_deployment.networks import NetworkRegistry
from accountable_deployment.params import DeployableUnitSpec, Dependency, VariableContext
from accountable_deployment.resolver import DependencyResolver
from accountable_deployment.types import DeployedUnit

DEVELOPMENT_CHAIN_ID = 1337
PUBLIC_CHAIN_ID = 11155111
OTHER_PUBLIC_CHAIN_ID = 137
DEVELOPMENT_LINK_TOKEN = to_checksum_address("0x" + "3f" * 20)


def _address(character: str) -> str:
    return to_checksum_address("0x" + character * 40)


class FakeBackend(DeployerBackend):
    """Records every call and hands out sequential addresses."""

    def __init__(self):
        self.instances = OrderedDict()
        self.deploy_calls = list()
        self.verify_calls = list()
        self.lookups = list()
        self.failing_units = set()
        self.verify_error = None
        self._nonce = 0

    def add_instance(self, unit_name, address, abi=None):
        unit = DeployedUnit(address=address, abi=abi or [{"type": "constructor", "inputs": []}])
        self.instances.setdefault(unit_name, list()).append(unit)
        return unit

    def deploy(self, unit_name, arguments, confirmations):
        self.deploy_calls.append((unit_name, list(arguments), confirmations))
        if unit_name in self.failing_units:
            raise DeployError("execution reverted")
        self._nonce += 1
        address = to_checksum_address(f"0x{self._nonce:040x}")
        abi = [{"type": "function", "name": f"{unit_name[0].lower()}{unit_name[1:]}"}]
        return self.add_instance(unit_name, address, abi=abi)

    def verify(self, address, arguments):
        self.verify_calls.append((address, list(arguments)))
        if self.verify_error:
            raise VerifyError(self.verify_error)

    def get_deployed_instance(self, unit_name):
        self.lookups.append(unit_name)
        try:
            return self.instances[unit_name][-1]
        except KeyError:
            raise UnitNotFound(f"{unit_name} is not deployed", unit_name=unit_name)


@pytest.fixture
def address():
    return _address


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def mocks(backend):
    """Mock dependencies as deployed by the mocks params file."""
    deployed = {
        "MockWethToken": _address("a"),
        "MockV3Aggregator": _address("b"),
        "MockWbtcToken": _address("1"),
        "MockUsdcToken": _address("2"),
        "MockLinkToken": _address("3"),
    }
    for unit_name, unit_address in deployed.items():
        backend.add_instance(unit_name, unit_address)
    return deployed


@pytest.fixture
def networks_config():
    return {
        "networks": {
            DEVELOPMENT_CHAIN_ID: {
                "name": "development-A",
                "classification": "development",
                "confirmations": 0,
                "dependencies": {
                    "linkToken": DEVELOPMENT_LINK_TOKEN,
                    "keeperRegistry": _address("4"),
                    "keeperRegistrar": _address("5"),
                    "cronUpKeepFactory": _address("6"),
                },
            },
            PUBLIC_CHAIN_ID: {
                "name": "public-B",
                "classification": "public",
                "confirmations": 6,
                "dependencies": {
                    "weth": _address("c"),
                    "wbtc": _address("7"),
                    "usdc": _address("8"),
                    "wethUsdPriceFeed": _address("d"),
                    "wbtcUsdPriceFeed": _address("9"),
                    "usdcUsdPriceFeed": _address("e"),
                    "linkToken": _address("f"),
                    "keeperRegistry": _address("4"),
                    "keeperRegistrar": _address("5"),
                    "cronUpKeepFactory": _address("6"),
                },
            },
            OTHER_PUBLIC_CHAIN_ID: {
                "name": "public-C",
                "classification": "public",
                "confirmations": 12,
                "dependencies": {
                    "weth": _address("c"),
                    "wethUsdPriceFeed": _address("d"),
                },
            },
        }
    }


@pytest.fixture
def registry(networks_config):
    return NetworkRegistry.from_config(networks_config)


@pytest.fixture
def resolver(registry, backend):
    return DependencyResolver(registry=registry, backend=backend)


@pytest.fixture
def weth_spec():
    """A unit requiring [weth, wethUsdPriceFeed]."""
    context = VariableContext(unit_name="Vault")
    return DeployableUnitSpec(
        name="Vault",
        parameters=OrderedDict(
            [
                ("_token", Dependency("weth", context)),
                ("_priceFeed", Dependency("wethUsdPriceFeed", context)),
            ]
        ),
    )


@pytest.fixture
def artifact_paths(tmp_path):
    return ArtifactPaths.from_dir(tmp_path / "constants")


@pytest.fixture
def synchronizer(registry, artifact_paths):
    return ArtifactSynchronizer(
        registry=registry, paths=artifact_paths, enabled=True, primary_unit="Vault"
    )
