from collections import OrderedDict
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from accountable_deployment.constants import NETWORKS_FILEPATH, ZERO_ADDRESS
from accountable_deployment.errors import (
    NetworkConfigError,
    UnknownDependency,
    UnknownNetwork,
)
from accountable_deployment.types import ChainId, DependencyName
from accountable_deployment.utils import _load_yaml


class NetworkClassification(Enum):
    DEVELOPMENT = "development"
    PUBLIC = "public"


class NetworkConfig(NamedTuple):
    """Static description of a single supported network."""

    chain_id: ChainId
    name: str
    classification: NetworkClassification
    confirmations: int
    dependencies: Dict[DependencyName, ChecksumAddress]

    @property
    def is_development(self) -> bool:
        return self.classification == NetworkClassification.DEVELOPMENT

    @property
    def is_public(self) -> bool:
        return self.classification == NetworkClassification.PUBLIC

    def address_of(self, dependency: DependencyName) -> Optional[ChecksumAddress]:
        return self.dependencies.get(dependency)


def _parse_classification(chain_id: ChainId, value) -> NetworkClassification:
    try:
        return NetworkClassification(value)
    except ValueError:
        raise NetworkConfigError(
            f"Invalid classification '{value}' for network; expected one of "
            f"{', '.join(c.value for c in NetworkClassification)}",
            chain_id=chain_id,
        )


def _parse_confirmations(
    chain_id: ChainId, value, classification: NetworkClassification
) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise NetworkConfigError(
            f"Confirmations must be a non-negative integer, got '{value}'", chain_id=chain_id
        )
    if value == 0 and classification == NetworkClassification.PUBLIC:
        raise NetworkConfigError(
            "Zero confirmations are only permitted on development networks", chain_id=chain_id
        )
    return value


def _parse_dependencies(chain_id: ChainId, table) -> Dict[DependencyName, ChecksumAddress]:
    table = table or dict()
    if not isinstance(table, dict):
        raise NetworkConfigError("Malformed dependency table.", chain_id=chain_id)

    dependencies = OrderedDict()
    for key, address in table.items():
        try:
            dependency = DependencyName.from_name(key)
        except UnknownDependency as e:
            raise e.with_context(unit_name=None, chain_id=chain_id)
        try:
            checksum_address = to_checksum_address(address)
        except (TypeError, ValueError):
            raise NetworkConfigError(
                f"Invalid address '{address}' for dependency '{key}'", chain_id=chain_id
            )
        dependencies[dependency] = checksum_address
    return dependencies


def _network_from_config(chain_id, data: Dict) -> NetworkConfig:
    try:
        chain_id = int(chain_id)
    except (TypeError, ValueError):
        raise NetworkConfigError(f"Invalid chain id '{chain_id}'")
    if not isinstance(data, dict) or not data.get("name"):
        raise NetworkConfigError("Network entry is missing a 'name'.", chain_id=chain_id)

    classification = _parse_classification(chain_id, data.get("classification"))
    return NetworkConfig(
        chain_id=chain_id,
        name=data["name"],
        classification=classification,
        confirmations=_parse_confirmations(chain_id, data.get("confirmations"), classification),
        dependencies=_parse_dependencies(chain_id, data.get("dependencies")),
    )


class NetworkRegistry:
    """
    Validated lookup table of every network a deployment can target, keyed by chain id.
    Built once at startup; lookups are pure.
    """

    def __init__(self, networks: Iterable[NetworkConfig]):
        self._networks = OrderedDict()
        names = set()
        for network in networks:
            if network.chain_id in self._networks:
                raise NetworkConfigError("Duplicate network entry.", chain_id=network.chain_id)
            if network.name in names:
                raise NetworkConfigError(f"Duplicate network name '{network.name}'.")
            names.add(network.name)
            self._networks[network.chain_id] = network

    @classmethod
    def from_config(cls, config: Dict) -> "NetworkRegistry":
        networks_config = config.get("networks")
        if not networks_config:
            raise NetworkConfigError("Networks file missing 'networks' field.")
        networks = [
            _network_from_config(chain_id, data) for chain_id, data in networks_config.items()
        ]
        return cls(networks=networks)

    @classmethod
    def from_yaml(cls, filepath: Path = NETWORKS_FILEPATH) -> "NetworkRegistry":
        config = _load_yaml(filepath)
        return cls.from_config(config)

    def __contains__(self, chain_id) -> bool:
        return chain_id in self._networks

    def __iter__(self):
        return iter(self._networks.values())

    @property
    def chain_ids(self) -> List[ChainId]:
        return list(self._networks)

    def lookup(self, chain_id: ChainId) -> NetworkConfig:
        try:
            return self._networks[int(chain_id)]
        except (KeyError, TypeError, ValueError):
            raise UnknownNetwork(f"Network '{chain_id}' is not registered")

    def by_name(self, name: str) -> NetworkConfig:
        for network in self._networks.values():
            if network.name == name:
                return network
        raise UnknownNetwork(f"Network '{name}' is not registered")

    def validate(self, unit_specs, chain_ids: Optional[Iterable[ChainId]] = None) -> None:
        """
        Checks that every public network (or only those in chain_ids) has an address
        for every dependency declared by the given unit specs.
        """
        if chain_ids is None:
            networks = list(self)
        else:
            networks = [self.lookup(chain_id) for chain_id in chain_ids]

        missing = list()
        for network in networks:
            if not network.is_public:
                continue
            for spec in unit_specs:
                for dependency in OrderedDict.fromkeys(spec.dependencies):
                    address = network.address_of(dependency)
                    if not address or address == ZERO_ADDRESS:
                        missing.append(
                            f"{network.name} ({network.chain_id}): "
                            f"{spec.name} requires '{dependency.value}'"
                        )
        if missing:
            raise NetworkConfigError(
                "Missing dependency addresses for public networks:\n\t" + "\n\t".join(missing)
            )
