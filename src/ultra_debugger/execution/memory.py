"""Host-process memory sampling for the execution harness.

The samples describe this Python process, not the analyzed source, which is
never executed.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

import psutil

from ..models import MemorySample, now_ms


def process_memory() -> MemorySample:
    info = psutil.Process().memory_info()
    return MemorySample(timestamp=now_ms(), heap_used=info.rss, heap_total=info.vms)


class MemorySampler:
    """Samples memory on a fixed period until ``limit`` samples exist.

    ``start()`` schedules the sampling task on the running loop; ``stop()``
    cancels it if it is still running. The sampler owns its sample list.
    """

    def __init__(
        self,
        limit: int = 10,
        interval: float = 0.1,
        probe: Callable[[], MemorySample] = process_memory,
    ):
        self.limit = limit
        self.interval = interval
        self.probe = probe
        self.samples: list[MemorySample] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while len(self.samples) < self.limit:
            await asyncio.sleep(self.interval)
            self.samples.append(self.probe())

    async def stop(self) -> None:
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
