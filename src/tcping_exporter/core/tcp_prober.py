import asyncio
import logging
import time
from typing import Optional

from tcping_exporter.abstractions.prober import Prober
from tcping_exporter.contracts.statistics import ProbeRun
from tcping_exporter.contracts.target import PingPolicy, Target

logger = logging.getLogger(__name__)


class TcpProber(Prober):
    """
    Measures TCP connect round-trip time to a single target.

    Each attempt opens a connection bounded by the policy timeout. A successful
    attempt records its latency, closes the connection and then waits the
    policy interval; a failed attempt is counted as lost and the next attempt
    starts immediately.
    """

    async def probe(self, target: Target, policy: PingPolicy) -> ProbeRun:
        run = ProbeRun()
        timeout = self._timeout_seconds(policy)

        for _ in range(policy.count):
            run.record_sent()
            start = time.perf_counter()
            try:
                _, writer = await asyncio.wait_for(
                    asyncio.open_connection(target.host, target.port), timeout=timeout
                )
            except (OSError, asyncio.TimeoutError, ValueError, OverflowError) as e:
                logger.warning(
                    f"TCPing to {target.address} ({target.name}) failed: {self._describe(e)}"
                )
                continue
            # Truncate to microsecond resolution
            elapsed_ms = int((time.perf_counter() - start) * 1_000_000) / 1000.0

            run.record_response(elapsed_ms)
            await self._close(writer, target)
            logger.info(f"TCPing to {target.address} ({target.name}) - time={elapsed_ms:.3f}ms")
            await asyncio.sleep(policy.interval)

        logger.info(
            f"TCPing status for {target.address} ({target.name}): sent_count={run.sent_count}, "
            f"responded_count={run.responded_count}, latencies={run.latencies}"
        )
        return run

    @staticmethod
    def _timeout_seconds(policy: PingPolicy) -> Optional[float]:
        # A zero timeout leaves the connect unbounded
        if policy.timeout <= 0:
            return None
        return policy.timeout / 1000.0

    @staticmethod
    def _describe(error: BaseException) -> str:
        if isinstance(error, asyncio.TimeoutError):
            return "connection timed out"
        return str(error) or error.__class__.__name__

    @staticmethod
    async def _close(writer: asyncio.StreamWriter, target: Target):
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error closing connection to {target.address}: {e}")
