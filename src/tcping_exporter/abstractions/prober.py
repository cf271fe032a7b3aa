from abc import ABC, abstractmethod

from tcping_exporter.contracts.statistics import ProbeRun
from tcping_exporter.contracts.target import PingPolicy, Target


class Prober(ABC):
    """
    Abstract base class for single-target probers.
    """

    @abstractmethod
    async def probe(self, target: Target, policy: PingPolicy) -> ProbeRun:
        """
        Run the policy's sequence of attempts against one target.

        Args:
            target (Target): The endpoint to probe.
            policy (PingPolicy): Attempt count, connect timeout and pacing.

        Returns:
            ProbeRun: Raw attempt outcomes. Connection failures are recorded
            as lost attempts and never raised.
        """
