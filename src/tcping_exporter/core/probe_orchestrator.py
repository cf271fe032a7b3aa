import asyncio
import logging
from typing import Dict, Optional, Sequence, Tuple

from tcping_exporter.abstractions.prober import Prober
from tcping_exporter.contracts.statistics import Statistics
from tcping_exporter.contracts.target import PingPolicy, Target
from tcping_exporter.core.aggregator import compute_statistics
from tcping_exporter.core.profiler import Profiler
from tcping_exporter.core.tcp_prober import TcpProber

logger = logging.getLogger(__name__)

Label = Tuple[str, str, str]


class ProbeOrchestrator:
    """
    Fans out one probing task per target and gathers their statistics.
    """

    def __init__(self, prober: Optional[Prober] = None):
        self.prober = prober or TcpProber()

    async def _probe_target(self, target: Target, policy: PingPolicy) -> Statistics:
        try:
            run = await self.prober.probe(target, policy)
        except Exception as e:
            logger.error(f"Probe error for {target.address} ({target.name}): {e}")
            return Statistics(label=target.label, loss_percent=100.0)
        return compute_statistics(run, target.label)

    @Profiler.profile
    async def probe_all(
        self, targets: Sequence[Target], policy: PingPolicy
    ) -> Dict[Label, Statistics]:
        """
        Probe every target concurrently and wait for all of them to finish.

        Args:
            targets (Sequence[Target]): Targets to probe, one task each.
            policy (PingPolicy): Policy shared read-only by every task.

        Returns:
            dict: Statistics keyed by each target's (host, port, name) label.
        """
        tasks = [
            asyncio.create_task(self._probe_target(target, policy))
            for target in targets
        ]
        results: Dict[Label, Statistics] = {}
        for stats in await asyncio.gather(*tasks):
            if stats.label in results:
                logger.warning(f"Duplicate target label {stats.label}; keeping the latest result")
            results[stats.label] = stats
        logger.info(f"Probed {len(tasks)} targets")
        return results
