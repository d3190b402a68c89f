"""Assembly of the full hwtop report."""

import threading
import time
from typing import Callable

from hwtop.config import HostPaths
from hwtop.samplers import CpuFrequencySampler, DiskUsageSampler, loadavg, meminfo
from hwtop.sensors import SensorAggregator
from hwtop.stats import FrequencyStats


def format_elapsed(seconds: float) -> str:
    """Format a duration truncated to microseconds."""
    micros = int(seconds * 1_000_000)
    if micros < 1000:
        return f"{micros}µs"
    return f"{micros / 1000:.3f}ms"


class Reporter:
    """
    Renders the report: CPU, memory, load, disk and sensors, in that order.

    Sections read live state independently, so they may reflect slightly
    different instants. render() must only be called from one thread at a
    time; reset() and the debug toggle are safe from any thread.
    """

    def __init__(
        self,
        paths: HostPaths | None = None,
        stats: FrequencyStats | None = None,
        root_device: str | None = None,
    ) -> None:
        """
        Initialize the Reporter.

        Args:
            paths: Where to sample from. Defaults to the standard locations.
            stats: Min/max table to update, shared with whoever resets it.
            root_device: Root device name; looked up in the mount table if None.
        """
        self._paths = paths or HostPaths()
        self._stats = stats if stats is not None else FrequencyStats()
        self._cpu = CpuFrequencySampler(self._stats, self._paths.cpuinfo)
        self._disk = DiskUsageSampler(self._paths.disk, device=root_device)
        self._sensors = SensorAggregator(self._paths.hwmon)
        self._debug = threading.Event()

    @property
    def stats(self) -> FrequencyStats:
        return self._stats

    @property
    def debug(self) -> bool:
        """Whether timings and unrecognized sensors are reported."""
        return self._debug.is_set()

    @debug.setter
    def debug(self, value: bool) -> None:
        if value:
            self._debug.set()
        else:
            self._debug.clear()

    def toggle_debug(self) -> bool:
        """Flip diagnostic verbosity and return the new state."""
        self.debug = not self.debug
        return self.debug

    def reset(self) -> None:
        """Reset the accumulated min/max frequencies."""
        self._stats.reset()

    def _timed(self, section: Callable[[], str]) -> str:
        if not self.debug:
            return section()
        start = time.perf_counter()
        text = section()
        return f" ({format_elapsed(time.perf_counter() - start)})\n{text}"

    def render(self) -> str:
        """Sample everything once and return the report text."""
        report = self._timed(self._cpu.render)
        report += "Memory [MiB]\n" + self._timed(lambda: meminfo(self._paths.meminfo)) + "\n"
        report += "Load average\n" + self._timed(lambda: loadavg(self._paths.loadavg)) + "\n"
        report += "Root disk\n" + self._timed(self._disk.render) + "\n\n"
        report += "Sensors\n" + self._timed(lambda: self._sensors.render(self.debug))
        return report

    def close(self) -> None:
        """Release the cpuinfo stream."""
        self._cpu.close()
