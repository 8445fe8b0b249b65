from abc import ABC, abstractmethod
from typing import Any, Sequence

from eth_typing import ChecksumAddress

from accountable_deployment.types import DeployedUnit, UnitName


class DeployerBackend(ABC):
    """
    The transaction machinery deployments are submitted through.

    Implementations raise DeployError, VerifyError and UnitNotFound
    (see accountable_deployment.errors) and nothing else.
    """

    @abstractmethod
    def deploy(
        self, unit_name: UnitName, arguments: Sequence[Any], confirmations: int
    ) -> DeployedUnit:
        """Deploys a unit and blocks until `confirmations` blocks have been observed."""
        raise NotImplementedError

    @abstractmethod
    def verify(self, address: ChecksumAddress, arguments: Sequence[Any]) -> None:
        """Publishes the source of a deployed unit to the network's block explorer."""
        raise NotImplementedError

    @abstractmethod
    def get_deployed_instance(self, unit_name: UnitName) -> DeployedUnit:
        """Returns the most recent deployment of a unit on the connected network."""
        raise NotImplementedError
