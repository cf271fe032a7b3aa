import asyncio
import time
import unittest

from tcping_exporter.abstractions.prober import Prober
from tcping_exporter.contracts.statistics import ProbeRun
from tcping_exporter.contracts.target import PingPolicy, Target
from tcping_exporter.core.probe_orchestrator import ProbeOrchestrator
from tcping_exporter.core.tcp_prober import TcpProber


class ScriptedProber(Prober):
    """Returns canned runs after a per-host delay."""

    def __init__(self, runs, delays=None):
        self.runs = runs
        self.delays = delays or {}
        self.calls = []

    async def probe(self, target, policy):
        self.calls.append(target)
        await asyncio.sleep(self.delays.get(target.host, 0))
        return self.runs[target.host].model_copy(deep=True)


POLICY = PingPolicy(interval=0, timeout=100, count=3)


class TestProbeOrchestrator(unittest.IsolatedAsyncioTestCase):
    def test_defaults_to_tcp_prober(self):
        self.assertIsInstance(ProbeOrchestrator().prober, TcpProber)

    async def test_results_keyed_by_label(self):
        prober = ScriptedProber(
            runs={
                "slow": ProbeRun(sent_count=3, responded_count=3, latencies=[10.0, 12.0, 11.0]),
                "fast": ProbeRun(sent_count=3, responded_count=0),
            },
            # The first target finishes last
            delays={"slow": 0.05, "fast": 0.0},
        )
        targets = [
            Target(host="slow", port="1", name="a"),
            Target(host="fast", port="2", name="b"),
        ]
        results = await ProbeOrchestrator(prober).probe_all(targets, POLICY)

        self.assertEqual(set(results), {("slow", "1", "a"), ("fast", "2", "b")})
        self.assertEqual(results[("slow", "1", "a")].avg_time, 11.0)
        self.assertEqual(results[("slow", "1", "a")].loss_percent, 0.0)
        self.assertEqual(results[("fast", "2", "b")].loss_percent, 100.0)
        self.assertEqual(len(prober.calls), 2)

    async def test_targets_probed_in_parallel(self):
        prober = ScriptedProber(
            runs={
                "long": ProbeRun(sent_count=1, responded_count=1, latencies=[1.0]),
                "short": ProbeRun(sent_count=1, responded_count=1, latencies=[1.0]),
            },
            delays={"long": 0.4, "short": 0.2},
        )
        targets = [Target(host="long", port="1", name="l"), Target(host="short", port="1", name="s")]

        start = time.perf_counter()
        results = await ProbeOrchestrator(prober).probe_all(targets, POLICY)
        elapsed = time.perf_counter() - start

        self.assertEqual(len(results), 2)
        self.assertGreaterEqual(elapsed, 0.39)
        self.assertLess(elapsed, 0.55)

    async def test_failing_prober_reports_total_loss(self):
        class BrokenProber(ScriptedProber):
            async def probe(self, target, policy):
                if target.host == "broken":
                    raise RuntimeError("prober crashed")
                return await super().probe(target, policy)

        prober = BrokenProber(
            runs={"ok": ProbeRun(sent_count=1, responded_count=1, latencies=[4.0])},
            delays={"ok": 0.05},
        )
        targets = [Target(host="broken", port="1", name="b"), Target(host="ok", port="1", name="o")]
        with self.assertLogs("tcping_exporter.core.probe_orchestrator", level="ERROR"):
            results = await ProbeOrchestrator(prober).probe_all(targets, POLICY)

        self.assertEqual(len(results), 2)
        self.assertEqual(results[("broken", "1", "b")].loss_percent, 100.0)
        self.assertFalse(results[("broken", "1", "b")].has_latency)
        self.assertEqual(results[("ok", "1", "o")].avg_time, 4.0)

    async def test_invalid_address_does_not_break_other_targets(self):
        async def handle(reader, writer):
            writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        port = str(server.sockets[0].getsockname()[1])
        targets = [
            Target(host="127.0.0.1", port=port, name="ok"),
            Target(host="a..b", port="80", name="bad"),
        ]
        try:
            results = await ProbeOrchestrator().probe_all(
                targets, PingPolicy(interval=0, timeout=200, count=2)
            )
        finally:
            server.close()
            await server.wait_closed()

        self.assertEqual(len(results), 2)
        self.assertEqual(results[("127.0.0.1", port, "ok")].loss_percent, 0.0)
        self.assertEqual(results[("a..b", "80", "bad")].loss_percent, 100.0)

    async def test_no_targets(self):
        results = await ProbeOrchestrator(ScriptedProber(runs={})).probe_all([], POLICY)
        self.assertEqual(results, {})

    async def test_duplicate_labels_collapse(self):
        prober = ScriptedProber(runs={"dup": ProbeRun(sent_count=1, responded_count=0)})
        targets = [Target(host="dup", port="1", name="x"), Target(host="dup", port="1", name="x")]
        with self.assertLogs("tcping_exporter.core.probe_orchestrator", level="WARNING"):
            results = await ProbeOrchestrator(prober).probe_all(targets, POLICY)
        self.assertEqual(len(results), 1)
        self.assertEqual(len(prober.calls), 2)


if __name__ == "__main__":
    unittest.main()
