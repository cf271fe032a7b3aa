import asyncio
import enum
import logging
from typing import Callable, List, Optional

from prometheus_client.core import Metric

from tcping_exporter.config.exporter_config import ExporterConfig, load_config
from tcping_exporter.core.metrics import build_metric_families
from tcping_exporter.core.probe_orchestrator import ProbeOrchestrator
from tcping_exporter.core.profiler import Profiler

logger = logging.getLogger(__name__)


class CoordinatorState(str, enum.Enum):
    IDLE = "idle"
    LOADING_CONFIG = "loading_config"
    PROBING = "probing"
    EMITTING = "emitting"


class CollectionCoordinator:
    """
    Scrape entry point. Serializes overlapping scrapes and runs one complete
    reload, probe and emit cycle per request.
    """

    def __init__(
        self,
        config_path: str,
        orchestrator: Optional[ProbeOrchestrator] = None,
        config_loader: Callable[[str], ExporterConfig] = load_config,
    ):
        """
        Initialize the CollectionCoordinator.

        Args:
            config_path (str): Path of the YAML configuration, re-read on every scrape.
            orchestrator (ProbeOrchestrator): Fans probes out over targets.
            config_loader (Callable): Loads and validates the configuration file.
        """
        self.config_path = config_path
        self.orchestrator = orchestrator or ProbeOrchestrator()
        self.config_loader = config_loader
        self.latest_config: Optional[ExporterConfig] = None
        self.state = CoordinatorState.IDLE
        self._lock = asyncio.Lock()
        logger.info(f"CollectionCoordinator initialized with config {self.config_path}")

    @Profiler.profile
    async def collect(self) -> List[Metric]:
        """
        Reload the configuration, probe every target and build metric families.

        A call made while another is in progress waits for it to finish and then
        runs its own full cycle.

        Returns:
            list: Prometheus metric families for the current statistics.

        Raises:
            ConfigError: If the configuration cannot be loaded.
        """
        async with self._lock:
            try:
                self.state = CoordinatorState.LOADING_CONFIG
                config = await asyncio.to_thread(self.config_loader, self.config_path)
                self.latest_config = config

                self.state = CoordinatorState.PROBING
                results = await self.orchestrator.probe_all(config.targets, config.ping)

                self.state = CoordinatorState.EMITTING
                families = build_metric_families(results.values())
                logger.info(f"Collected statistics for {len(results)} targets")
                return families
            finally:
                self.state = CoordinatorState.IDLE
