from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProcessSnapshot(BaseModel):
    """One row of the process table, as seen over a single sampling window."""

    model_config = ConfigDict(frozen=True)

    pid: int
    name: str = ""
    cpu_usage_percent: float = Field(default=0.0, ge=0.0, serialization_alias="cpu_usage")
    memory_bytes: int = Field(default=0, ge=0, serialization_alias="memory")

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True)


def rank_processes(processes: list[ProcessSnapshot], limit: int) -> list[ProcessSnapshot]:
    """Top ``limit`` processes by CPU, ties broken by ascending pid."""
    if limit <= 0:
        return []
    ordered = sorted(processes, key=lambda p: (-p.cpu_usage_percent, p.pid))
    return ordered[:limit]
