"""Host locations read by hwtop."""

import os
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class HostPaths:
    """Locations of the pseudo-files and directories that get sampled."""

    cpuinfo: str = "/proc/cpuinfo"
    meminfo: str = "/proc/meminfo"
    loadavg: str = "/proc/loadavg"
    hwmon: str = "/sys/class/hwmon"
    disk: str = "/"

    @classmethod
    def from_env(cls) -> "HostPaths":
        """
        Build paths honouring environment overrides.

        HWTOP_PROC_DIR replaces /proc, HWTOP_HWMON_DIR the hwmon class
        directory and HWTOP_DISK_PATH the filesystem reported as root disk.
        """
        proc = os.environ.get("HWTOP_PROC_DIR", "/proc")
        return cls(
            cpuinfo=os.path.join(proc, "cpuinfo"),
            meminfo=os.path.join(proc, "meminfo"),
            loadavg=os.path.join(proc, "loadavg"),
            hwmon=os.environ.get("HWTOP_HWMON_DIR", "/sys/class/hwmon"),
            disk=os.environ.get("HWTOP_DISK_PATH", "/"),
        )
