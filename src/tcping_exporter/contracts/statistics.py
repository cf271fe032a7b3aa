from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class ProbeRun(BaseModel):
    """
    Raw outcome of one target's attempts within a single scrape.
    """

    sent_count: int = 0
    responded_count: int = 0
    latencies: List[float] = Field(default_factory=list)

    def record_sent(self):
        self.sent_count += 1

    def record_response(self, latency_ms: float):
        self.responded_count += 1
        self.latencies.append(latency_ms)


class Statistics(BaseModel):
    """
    Summary of one target's probe run. Latency fields are None when nothing responded.
    """

    label: Tuple[str, str, str]
    loss_percent: float
    min_time: Optional[float] = None
    max_time: Optional[float] = None
    avg_time: Optional[float] = None

    @property
    def has_latency(self) -> bool:
        return self.avg_time is not None
