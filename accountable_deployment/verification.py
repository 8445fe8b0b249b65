from enum import Enum
from typing import Any, NamedTuple, Optional, Sequence

from accountable_deployment.backend import DeployerBackend
from accountable_deployment.errors import VerifyError
from accountable_deployment.networks import NetworkRegistry
from accountable_deployment.types import ChainId


class VerificationStatus(Enum):
    SKIPPED = "skipped"
    VERIFIED = "verified"
    FAILED = "failed"


class VerificationOutcome(NamedTuple):
    status: VerificationStatus
    reason: Optional[str] = None

    @classmethod
    def skipped(cls) -> "VerificationOutcome":
        return cls(status=VerificationStatus.SKIPPED)

    @classmethod
    def verified(cls) -> "VerificationOutcome":
        return cls(status=VerificationStatus.VERIFIED)

    @classmethod
    def failed(cls, reason: str) -> "VerificationOutcome":
        return cls(status=VerificationStatus.FAILED, reason=reason)


class VerificationGate:
    """
    Publishes deployed sources to the block explorer on public networks when an
    explorer API key is available. Failures are reported, never raised.
    """

    def __init__(
        self, registry: NetworkRegistry, backend: DeployerBackend, api_key: Optional[str] = None
    ):
        self.registry = registry
        self.backend = backend
        self.api_key = api_key

    def should_verify(self, chain_id: ChainId) -> bool:
        network = self.registry.lookup(chain_id)
        return network.is_public and bool(self.api_key)

    def maybe_verify(self, resolved, chain_id: ChainId, arguments: Sequence[Any]):
        if not self.should_verify(chain_id):
            return VerificationOutcome.skipped()

        print(f"(i) Verifying {resolved.unit_name} at {resolved.address}...")
        try:
            self.backend.verify(resolved.address, arguments)
        except VerifyError as e:
            print(f"(!) Verification of {resolved.unit_name} failed: {e}")
            return VerificationOutcome.failed(reason=str(e))
        return VerificationOutcome.verified()
