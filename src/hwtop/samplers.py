"""Samplers for CPU frequency, memory, load average and disk usage."""

import logging
import math
import os
import re
from typing import Callable, Iterable, TextIO, TypeVar

import psutil

from hwtop.errors import HostError
from hwtop.models import CoreFrequencySample, DiskUsage, LoadAverage
from hwtop.stats import FrequencyStats

logger = logging.getLogger(__name__)

# Scale above the bars: one '#' per 100 MHz, ten per GHz
CPU_HEADER = "Core          0         1         2         3         4  GHz    Min  Max"
CPU_FOOTER = "              0         1         2         3         4  GHz    Min  Max"
BAR_WIDTH = 47
BAR_MARKER = 40  # bars shorter than this get a '|' at 4 GHz

MEMORY_FIELDS = ("MemTotal", "MemFree", "MemAvailable", "SwapCached", "SwapTotal", "SwapFree")
MEMORY_SPLIT = re.compile(r":?\s+")

BYTE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB", "EB"]

N = TypeVar("N", int, float)


def frequency_bar(mhz: float) -> str:
    """Render a frequency as a fixed-width bar of '#', one per 100 MHz."""
    length = max(0, min(math.floor(mhz / 100 + 0.5), BAR_WIDTH))
    bar = "#" * length
    if length < BAR_MARKER:
        return bar + " " * (BAR_MARKER - 1 - length) + "|" + " " * (BAR_WIDTH - BAR_MARKER)
    return bar + " " * (BAR_WIDTH - length)


def _field(line: str, parse: Callable[[str], N]) -> N:
    """Parse the value after the colon of a cpuinfo line."""
    try:
        return parse(line.split(":", 1)[1].strip())
    except (IndexError, ValueError) as e:
        raise HostError(f"parse error: {line.strip()!r}: {e}") from e


class CpuFrequencySampler:
    """
    Per physical core frequency from /proc/cpuinfo.

    The stream is opened on first use and rewound before every scan instead
    of being reopened on each tick. Only one thread may scan at a time.
    """

    def __init__(self, stats: FrequencyStats, path: str = "/proc/cpuinfo") -> None:
        self._stats = stats
        self._path = path
        self._stream: TextIO | None = None

    @property
    def stats(self) -> FrequencyStats:
        """The min/max table updated by every scan."""
        return self._stats

    def _rewind(self) -> TextIO:
        if self._stream is None:
            try:
                self._stream = open(self._path, encoding="utf-8", errors="replace")
            except OSError as e:
                raise HostError(f"cannot open {self._path}: {e}") from e
        self._stream.seek(0)
        return self._stream

    def close(self) -> None:
        """Release the cpuinfo stream."""
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def scan(self) -> list[CoreFrequencySample]:
        """
        Scan cpuinfo once and update the min/max table.

        A 'flags' line ends the record of a logical processor. Only the first
        logical processor of each physical core is counted.

        Returns:
            One sample per physical core, ordered by core id.

        Raises:
            HostError: a record lacks 'core id' or 'cpu MHz', or a value
                does not parse.
        """
        stream = self._rewind()
        samples: dict[int, CoreFrequencySample] = {}
        core_line = ""
        mhz_line = ""
        for line in stream:
            if line.startswith("core id"):
                core_line = line
                continue
            if line.startswith("cpu MHz"):
                mhz_line = line
                continue
            if not line.startswith("flags"):
                continue

            if not core_line or not mhz_line:
                raise HostError("values for core id or cpu MHz empty")
            core_id = _field(core_line, int)
            if core_id not in samples:
                mhz = _field(mhz_line, float)
                low, high = self._stats.update(core_id, mhz)
                samples[core_id] = CoreFrequencySample(
                    core_id=core_id, mhz=mhz, bar=frequency_bar(mhz), min_mhz=low, max_mhz=high
                )
            core_line = ""
            mhz_line = ""

        return [samples[core_id] for core_id in sorted(samples)]

    def render(self) -> str:
        """Bar chart with one row per physical core, between scale lines."""
        lines = [CPU_HEADER]
        for sample in self.scan():
            lines.append(
                f" {sample.core_id:2d}: {sample.mhz:4.0f} MHz |{sample.bar}  {sample.min_mhz:4.0f} {sample.max_mhz:4.0f}"
            )
        lines.append(CPU_FOOTER)
        return "\n".join(lines) + "\n"


def parse_meminfo(lines: Iterable[str]) -> dict[str, int]:
    """
    Collect the recognized counters of meminfo lines, in KiB.

    Lines that do not split into name, value and unit, or whose value is not
    an integer, are ignored.
    """
    counters: dict[str, int] = {}
    for line in lines:
        fields = MEMORY_SPLIT.split(line.rstrip("\n"), maxsplit=2)
        if len(fields) != 3 or fields[0] not in MEMORY_FIELDS:
            continue
        try:
            counters[fields[0]] = int(fields[1])
        except ValueError:
            continue
    return counters


def meminfo(path: str = "/proc/meminfo") -> str:
    """Memory totals in MiB."""
    try:
        with open(path, encoding="utf-8") as f:
            mem = parse_meminfo(f)
    except OSError as e:
        return str(e)

    def mib(name: str) -> int:
        return mem.get(name, 0) // 1024

    swap = (mem.get("SwapTotal", 0) - mem.get("SwapFree", 0)) // 1024
    return f" total:{mib('MemTotal')} free:{mib('MemFree')} available:{mib('MemAvailable')} swap:{swap}\n"


def parse_loadavg(text: str) -> LoadAverage:
    """Split the load average line into its five fields."""
    fields = text.split()
    if len(fields) < 5:
        raise HostError(f"unexpected load average format: {text.strip()!r}")
    return LoadAverage(*fields[:5])


def loadavg(path: str = "/proc/loadavg") -> str:
    """Load averages, scheduling entities and last PID."""
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError:
        return ""
    return f"{parse_loadavg(text)}\n"


def human_bytes(value: int) -> str:
    """
    Format a byte count with the smallest unit that keeps it below 1024.

    Plain bytes are never scaled: 0 -> '0B', 1536 -> '1.5 KB'.
    """
    index = 0
    target = 1024
    for index in range(len(BYTE_UNITS)):
        target = 1 << (10 * (index + 1))
        if value < target:
            break
    if index > 0:
        return f"{value / (target / 1024):0.1f} {BYTE_UNITS[index]}"
    return f"{value}B"


def find_root_device(partitions=None) -> str:
    """Device of the mount table entry mounted exactly on '/'."""
    if partitions is None:
        partitions = psutil.disk_partitions(all=True)
    for partition in partitions:
        if partition.mountpoint == "/":
            return partition.device
    return ""


class DiskUsageSampler:
    """Size, used and free space of the root filesystem."""

    def __init__(self, path: str = "/", device: str | None = None) -> None:
        self._path = path
        # The mount table is only read once
        self._device = find_root_device() if device is None else device

    @property
    def device(self) -> str:
        """Root device name."""
        return self._device

    def usage(self) -> DiskUsage:
        """Query filesystem statistics; free counts all free blocks."""
        try:
            st = os.statvfs(self._path)
        except OSError as e:
            logger.debug("statvfs %s failed: %s", self._path, e)
            return DiskUsage(device=self._device, size=0, used=0, free=0)
        size = st.f_blocks * st.f_frsize
        free = st.f_bfree * st.f_frsize
        return DiskUsage(device=self._device, size=size, used=size - free, free=free)

    def render(self) -> str:
        usage = self.usage()
        return (
            f" {usage.device} size:{human_bytes(usage.size)}"
            f"  used:{human_bytes(usage.used)}  free:{human_bytes(usage.free)}"
        )
