from typing import Tuple

from tcping_exporter.contracts.statistics import ProbeRun, Statistics


def compute_statistics(run: ProbeRun, label: Tuple[str, str, str]) -> Statistics:
    """
    Reduce one target's raw attempt outcomes into summary statistics.

    Args:
        run (ProbeRun): Attempt counts and recorded latencies in milliseconds.
        label (tuple): The (host, port, name) label tuple of the probed target.

    Returns:
        Statistics: Loss percentage in [0, 100]; min/max/avg latency only when
        at least one attempt responded.
    """
    if run.sent_count == 0:
        return Statistics(label=label, loss_percent=0.0)

    loss_percent = 100.0 * (run.sent_count - run.responded_count) / run.sent_count
    if run.responded_count == 0 or not run.latencies:
        return Statistics(label=label, loss_percent=loss_percent)

    return Statistics(
        label=label,
        loss_percent=loss_percent,
        min_time=min(run.latencies),
        max_time=max(run.latencies),
        avg_time=sum(run.latencies) / run.responded_count,
    )
