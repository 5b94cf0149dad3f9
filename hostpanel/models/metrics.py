from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def usage_percent(used: int, total: int) -> float:
    """``used / total * 100``, or 0 when there is nothing to measure."""
    if total <= 0:
        return 0.0
    return used / total * 100.0


class SystemMetrics(BaseModel):
    """Point-in-time snapshot of local system health.

    Field names follow the domain; ``to_api()`` renders the wire names the
    dashboard expects.
    """

    model_config = ConfigDict(frozen=True)

    cpu_usage_percent: float = Field(default=0.0, ge=0.0, le=100.0, serialization_alias="cpu_usage")
    total_memory_bytes: int = Field(default=0, ge=0, serialization_alias="total_memory")
    used_memory_bytes: int = Field(default=0, ge=0, serialization_alias="used_memory")
    memory_usage_percent: float = Field(default=0.0, ge=0.0, le=100.0, serialization_alias="memory_percentage")
    total_disk_bytes: int = Field(default=0, ge=0, serialization_alias="total_disk")
    used_disk_bytes: int = Field(default=0, ge=0, serialization_alias="used_disk")
    disk_usage_percent: float = Field(default=0.0, ge=0.0, le=100.0, serialization_alias="disk_percentage")
    os_name: str = "Unknown"
    host_name: str = "Unknown"

    @classmethod
    def build(
        cls,
        *,
        cpu_usage_percent: float,
        total_memory: int,
        used_memory: int,
        total_disk: int,
        used_disk: int,
        os_name: str,
        host_name: str,
    ) -> SystemMetrics:
        """Clamp raw OS figures and derive the percentages."""
        used_memory = max(0, min(used_memory, total_memory))
        used_disk = max(0, min(used_disk, total_disk))
        return cls(
            cpu_usage_percent=min(max(cpu_usage_percent, 0.0), 100.0),
            total_memory_bytes=total_memory,
            used_memory_bytes=used_memory,
            memory_usage_percent=usage_percent(used_memory, total_memory),
            total_disk_bytes=total_disk,
            used_disk_bytes=used_disk,
            disk_usage_percent=usage_percent(used_disk, total_disk),
            os_name=os_name,
            host_name=host_name,
        )

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True)
