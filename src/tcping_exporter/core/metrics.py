"""
Mapping of per-target statistics to Prometheus metric families.
"""
from typing import Iterable, List

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily, Metric

from tcping_exporter.contracts.statistics import Statistics

LABELS = ["host", "port", "name"]

LOSS_RATIO = "tcping_loss_ratio"
RTT_BEST = "tcping_rtt_best_ms"
RTT_WORST = "tcping_rtt_worst_ms"
RTT_MEAN = "tcping_rtt_mean_ms"

METRIC_HELP = {
    LOSS_RATIO: "Tcping Packet loss from 0.0 to 100.0",
    RTT_BEST: "Tcping Best round trip time",
    RTT_WORST: "Tcping Worst round trip time",
    RTT_MEAN: "Tcping Mean round trip time",
}


def build_metric_families(statistics: Iterable[Statistics]) -> List[Metric]:
    """
    Turn statistics into gauge families. Targets with total loss (or no
    recorded latency) only contribute a loss ratio sample.
    """
    families = {
        name: GaugeMetricFamily(name, help_text, labels=LABELS)
        for name, help_text in METRIC_HELP.items()
    }
    for stats in statistics:
        labels = list(stats.label)
        families[LOSS_RATIO].add_metric(labels, stats.loss_percent)
        if stats.loss_percent == 100.0 or not stats.has_latency:
            continue
        families[RTT_BEST].add_metric(labels, stats.min_time)
        families[RTT_WORST].add_metric(labels, stats.max_time)
        families[RTT_MEAN].add_metric(labels, stats.avg_time)
    return list(families.values())


class SnapshotCollector:
    """
    Custom collector yielding a fixed set of already computed metric families.
    """

    def __init__(self, families: List[Metric]):
        self._families = families

    def collect(self):
        return iter(self._families)


def render_latest(families: List[Metric]) -> bytes:
    """
    Render metric families in the Prometheus text exposition format.
    """
    registry = CollectorRegistry()
    registry.register(SnapshotCollector(families))
    return generate_latest(registry)
