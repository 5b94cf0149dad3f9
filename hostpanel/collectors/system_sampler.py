from __future__ import annotations

import logging
import platform
import socket
from typing import NamedTuple

import psutil

from hostpanel.collectors.base import BaseCollector
from hostpanel.collectors.window import CounterWindow
from hostpanel.models import SystemMetrics

logger = logging.getLogger(__name__)


class CpuTimes(NamedTuple):
    busy: float
    total: float


def read_cpu_times() -> CpuTimes:
    """Aggregate CPU counters across all cores, in seconds."""
    t = psutil.cpu_times()
    # Linux folds guest time into user time already
    total = sum(t) - getattr(t, "guest", 0.0) - getattr(t, "guest_nice", 0.0)
    idle = t.idle + getattr(t, "iowait", 0.0)
    return CpuTimes(busy=total - idle, total=total)


def cpu_busy_percent(before: CpuTimes, after: CpuTimes) -> float:
    elapsed = after.total - before.total
    if elapsed <= 0:
        return 0.0
    busy = after.busy - before.busy
    return min(max(busy / elapsed * 100.0, 0.0), 100.0)


class SystemSampler(BaseCollector[SystemMetrics]):
    """Samples CPU, memory, primary disk and host identity.

    CPU usage is the busy share of all cores between two ``cpu_times()``
    readings at least ``cpu_window`` seconds apart.
    """

    name = "system_sampler"

    def __init__(
        self,
        timeout: float = 3.0,
        cache_ttl: float = 1.0,
        cpu_window: float = 0.25,
        baseline_max_age: float = 5.0,
        disk_path: str = "/",
        aggregate_disks: bool = False,
    ) -> None:
        super().__init__(timeout=timeout, cache_ttl=cache_ttl)
        self.disk_path = disk_path
        self.aggregate_disks = aggregate_disks
        self._cpu = CounterWindow(read_cpu_times, min_window=cpu_window, max_age=baseline_max_age)
        self._identity: tuple[str, str] | None = None

    async def sample(self) -> SystemMetrics:
        return await self.collect()

    def read(self) -> SystemMetrics:
        before, after, _ = self._cpu.span()
        mem = psutil.virtual_memory()
        total_memory = int(mem.total)
        total_disk, used_disk = self._disk_usage()
        os_name, host_name = self._host_identity()

        return SystemMetrics.build(
            cpu_usage_percent=cpu_busy_percent(before, after),
            total_memory=total_memory,
            used_memory=total_memory - int(mem.available),
            total_disk=total_disk,
            used_disk=used_disk,
            os_name=os_name,
            host_name=host_name,
        )

    # ── helpers ─────────────────────────────────────────

    def _disk_usage(self) -> tuple[int, int]:
        if not self.aggregate_disks:
            usage = psutil.disk_usage(self.disk_path)
            return int(usage.total), int(usage.used)

        total = used = 0
        seen: set[str] = set()
        for part in psutil.disk_partitions(all=False):
            if part.device in seen:
                continue
            seen.add(part.device)
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                logger.debug("Skipping unreadable mount %s", part.mountpoint)
                continue
            total += int(usage.total)
            used += int(usage.used)
        return total, used

    def _host_identity(self) -> tuple[str, str]:
        if self._identity is None:
            self._identity = (_os_name(), platform.node() or socket.gethostname() or "Unknown")
        return self._identity


def _os_name() -> str:
    if platform.system() == "Linux":
        try:
            release = platform.freedesktop_os_release()
        except OSError:
            release = {}
        if release.get("NAME"):
            return release["NAME"]
    return platform.system() or "Unknown"
