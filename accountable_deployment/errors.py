import typing


class DeploymentError(Exception):
    """Base class for every failure raised while provisioning a network."""

    def __init__(
        self,
        message: str,
        unit_name: typing.Optional[str] = None,
        chain_id: typing.Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.unit_name = unit_name
        self.chain_id = chain_id

    def with_context(
        self, unit_name: typing.Optional[str], chain_id: typing.Optional[int]
    ) -> "DeploymentError":
        """Attaches the failing unit and network, keeping any context already set."""
        if self.unit_name is None:
            self.unit_name = unit_name
        if self.chain_id is None:
            self.chain_id = chain_id
        return self

    def __str__(self) -> str:
        context = list()
        if self.unit_name is not None:
            context.append(f"unit={self.unit_name}")
        if self.chain_id is not None:
            context.append(f"chain_id={self.chain_id}")
        if not context:
            return self.message
        return f"{self.message} [{', '.join(context)}]"


class DeploymentConfigError(DeploymentError, ValueError):
    """Raised for configuration or ordering defects; never retried."""


class UnknownNetwork(DeploymentConfigError):
    pass


class UnknownDependency(DeploymentConfigError):
    pass


class MissingDependencyAddress(DeploymentConfigError):
    pass


class NetworkConfigError(DeploymentConfigError):
    pass


class InvalidUnitSpec(DeploymentConfigError):
    pass


class UnitNotFound(DeploymentError, LookupError):
    pass


class DeployError(DeploymentError):
    pass


class VerifyError(DeploymentError):
    pass


class ArtifactSyncError(DeploymentError):
    pass
