from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from eth_typing import ChecksumAddress

from accountable_deployment.constants import (
    MOCK_LINK_TOKEN,
    MOCK_USDC_TOKEN,
    MOCK_V3_AGGREGATOR,
    MOCK_WBTC_TOKEN,
    MOCK_WETH_TOKEN,
)
from accountable_deployment.errors import UnknownDependency

ChainId = int
UnitName = str
ABI = List[Dict[str, Any]]


class DependencyKind(Enum):
    TOKEN = "token"
    PRICE_FEED = "price_feed"
    AUTOMATION = "automation"


class DependencyName(Enum):
    """The closed set of external contracts a deployable unit may depend on."""

    WETH = "weth"
    WBTC = "wbtc"
    USDC = "usdc"
    WETH_USD_PRICE_FEED = "wethUsdPriceFeed"
    WBTC_USD_PRICE_FEED = "wbtcUsdPriceFeed"
    USDC_USD_PRICE_FEED = "usdcUsdPriceFeed"
    LINK_TOKEN = "linkToken"
    KEEPER_REGISTRY = "keeperRegistry"
    KEEPER_REGISTRAR = "keeperRegistrar"
    CRON_UPKEEP_FACTORY = "cronUpKeepFactory"

    @classmethod
    def from_name(cls, name: Any) -> "DependencyName":
        """Looks up a dependency by its configuration key, failing loudly for unknown names."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise UnknownDependency(
                f"Unknown dependency '{name}'; expected one of "
                f"{', '.join(member.value for member in cls)}"
            )

    @property
    def kind(self) -> DependencyKind:
        return _DEPENDENCY_KINDS[self]

    @property
    def mock_unit_name(self) -> Optional[str]:
        """Name of the mock unit standing in for this dependency on development networks."""
        return _MOCK_UNIT_NAMES.get(self)


_DEPENDENCY_KINDS = {
    DependencyName.WETH: DependencyKind.TOKEN,
    DependencyName.WBTC: DependencyKind.TOKEN,
    DependencyName.USDC: DependencyKind.TOKEN,
    DependencyName.LINK_TOKEN: DependencyKind.TOKEN,
    DependencyName.WETH_USD_PRICE_FEED: DependencyKind.PRICE_FEED,
    DependencyName.WBTC_USD_PRICE_FEED: DependencyKind.PRICE_FEED,
    DependencyName.USDC_USD_PRICE_FEED: DependencyKind.PRICE_FEED,
    DependencyName.KEEPER_REGISTRY: DependencyKind.AUTOMATION,
    DependencyName.KEEPER_REGISTRAR: DependencyKind.AUTOMATION,
    DependencyName.CRON_UPKEEP_FACTORY: DependencyKind.AUTOMATION,
}

# All price feeds share a single aggregator mock; automation components have no mock.
_MOCK_UNIT_NAMES = {
    DependencyName.WETH: MOCK_WETH_TOKEN,
    DependencyName.WBTC: MOCK_WBTC_TOKEN,
    DependencyName.USDC: MOCK_USDC_TOKEN,
    DependencyName.LINK_TOKEN: MOCK_LINK_TOKEN,
    DependencyName.WETH_USD_PRICE_FEED: MOCK_V3_AGGREGATOR,
    DependencyName.WBTC_USD_PRICE_FEED: MOCK_V3_AGGREGATOR,
    DependencyName.USDC_USD_PRICE_FEED: MOCK_V3_AGGREGATOR,
}

# Keys of the front end's external contracts table, in the order they are written.
EXTERNAL_CONTRACTS = [
    DependencyName.LINK_TOKEN,
    DependencyName.KEEPER_REGISTRAR,
    DependencyName.KEEPER_REGISTRY,
    DependencyName.CRON_UPKEEP_FACTORY,
]


class DeployedUnit(NamedTuple):
    """What the deployment backend reports for a deployed (or looked up) unit."""

    address: ChecksumAddress
    abi: ABI


class ResolvedDeployment(NamedTuple):
    """The facts about one completed deployment, as published to the front end."""

    unit_name: UnitName
    chain_id: ChainId
    address: ChecksumAddress
    abi: ABI
    arguments: Tuple[Any, ...] = ()
