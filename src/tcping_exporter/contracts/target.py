from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Target(BaseModel):
    """
    Data model representing one TCP endpoint to probe.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    port: str
    name: str = ""

    @field_validator("host", "port", "name", mode="before")
    @classmethod
    def _coerce_scalar(cls, value):
        # YAML hands bare numbers and booleans over as native types
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @property
    def label(self) -> Tuple[str, str, str]:
        """
        Return the (host, port, name) tuple identifying this target's metric series.
        """
        return (self.host, self.port, self.name)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class PingPolicy(BaseModel):
    """
    Data model for the per-scrape probing policy shared by all targets.
    """

    model_config = ConfigDict(frozen=True)

    interval: int = Field(ge=0, description="Pause after a successful attempt, in seconds")
    timeout: int = Field(ge=0, description="Connect timeout per attempt, in milliseconds")
    count: int = Field(ge=0, description="Number of attempts per target")
