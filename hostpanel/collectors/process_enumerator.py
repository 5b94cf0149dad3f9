from __future__ import annotations

import logging
from typing import NamedTuple

import psutil

from hostpanel.collectors.base import BaseCollector
from hostpanel.collectors.window import CounterWindow
from hostpanel.models import ProcessSnapshot, rank_processes

logger = logging.getLogger(__name__)

_ATTRS = ["pid", "name", "cpu_times", "memory_info", "create_time"]


class ProcessReading(NamedTuple):
    pid: int
    name: str
    cpu_seconds: float
    memory_bytes: int


# (pid, create_time): a recycled pid is a different process
ProcessTable = dict[tuple[int, float], ProcessReading]


def read_process_table() -> ProcessTable:
    """Read every process visible at the current privilege level.

    Fields the OS refuses to disclose come back as zero/empty; processes that
    exit mid-scan are skipped.
    """
    table: ProcessTable = {}
    for proc in psutil.process_iter(_ATTRS):
        try:
            info = proc.info
            pid = info["pid"]
            cpu_times = info.get("cpu_times")
            memory_info = info.get("memory_info")
            key = (pid, info.get("create_time") or 0.0)
            table[key] = ProcessReading(
                pid=pid,
                name=info.get("name") or "",
                cpu_seconds=(cpu_times.user + cpu_times.system) if cpu_times else 0.0,
                memory_bytes=memory_info.rss if memory_info else 0,
            )
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    return table


def process_cpu_percent(before: ProcessTable, after: ProcessTable, elapsed: float) -> list[ProcessSnapshot]:
    snapshots: list[ProcessSnapshot] = []
    for key, cur in after.items():
        prev = before.get(key)
        if prev is None or elapsed <= 0:
            percent = 0.0
        else:
            percent = max((cur.cpu_seconds - prev.cpu_seconds) / elapsed * 100.0, 0.0)
        snapshots.append(
            ProcessSnapshot(
                pid=cur.pid,
                name=cur.name,
                cpu_usage_percent=percent,
                memory_bytes=max(cur.memory_bytes, 0),
            )
        )
    return snapshots


class ProcessEnumerator(BaseCollector[list[ProcessSnapshot]]):
    """Ranks running processes by CPU share over a sampling window.

    Percentages are relative to one core, like ``top``.
    """

    name = "process_enumerator"

    def __init__(
        self,
        timeout: float = 3.0,
        cache_ttl: float = 1.0,
        cpu_window: float = 0.25,
        baseline_max_age: float = 5.0,
        default_limit: int = 20,
    ) -> None:
        super().__init__(timeout=timeout, cache_ttl=cache_ttl)
        self.default_limit = default_limit
        self._window = CounterWindow(read_process_table, min_window=cpu_window, max_age=baseline_max_age)

    async def top_processes(self, limit: int | None = None) -> list[ProcessSnapshot]:
        if limit is None:
            limit = self.default_limit
        return rank_processes(await self.collect(), limit)

    def read(self) -> list[ProcessSnapshot]:
        before, after, elapsed = self._window.span()
        snapshots = process_cpu_percent(before, after, elapsed)
        logger.debug("Enumerated %d processes over %.2fs", len(snapshots), elapsed)
        return snapshots
