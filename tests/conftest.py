"""Synthetic host files shared by the hwtop tests."""

import os
from types import SimpleNamespace

import pytest

from hwtop.config import HostPaths

MEMINFO = """\
MemTotal:       16384000 kB
MemFree:         8192000 kB
MemAvailable:   10240000 kB
Buffers:          123456 kB
SwapCached:            0 kB
SwapTotal:       2097152 kB
SwapFree:        1048576 kB
HugePages_Total:       0
"""

LOADAVG = "0.00 0.12 0.09 1/371 4461\n"


def cpuinfo_record(processor: int, core_id: int, mhz: float) -> str:
    """One logical processor block as found in /proc/cpuinfo."""
    return (
        f"processor\t: {processor}\n"
        f"cpu MHz\t\t: {mhz:.3f}\n"
        f"physical id\t: 0\n"
        f"core id\t\t: {core_id}\n"
        f"flags\t\t: fpu vme de pse\n"
        f"\n"
    )


def cpuinfo(*records: tuple[int, float]) -> str:
    """cpuinfo text for (core_id, mhz) pairs, one logical processor each."""
    return "".join(cpuinfo_record(i, core_id, mhz) for i, (core_id, mhz) in enumerate(records))


def add_hwmon_device(hwmon_root, name: str, module: str, files: dict[str, str]):
    """Create a device directory and link it under the hwmon root."""
    device = hwmon_root.parent / "devices" / name
    device.mkdir(parents=True)
    (device / "name").write_text(module + "\n")
    for filename, content in files.items():
        (device / filename).write_text(content)
    os.symlink(device, hwmon_root / name)
    return device


@pytest.fixture
def host(tmp_path) -> HostPaths:
    """A complete fake host: two cores, memory, load and one sensor chip."""
    proc = tmp_path / "proc"
    proc.mkdir()
    (proc / "cpuinfo").write_text(cpuinfo((0, 2100.0), (1, 3000.0), (0, 2500.0), (1, 3100.0)))
    (proc / "meminfo").write_text(MEMINFO)
    (proc / "loadavg").write_text(LOADAVG)

    hwmon = tmp_path / "hwmon"
    hwmon.mkdir()
    add_hwmon_device(
        hwmon,
        "hwmon0",
        "coretemp",
        {"temp1_input": "42500\n", "temp1_label": "Package id 0\n", "fan1_input": "1200\n"},
    )

    return HostPaths(
        cpuinfo=str(proc / "cpuinfo"),
        meminfo=str(proc / "meminfo"),
        loadavg=str(proc / "loadavg"),
        hwmon=str(hwmon),
        disk=str(tmp_path),
    )


@pytest.fixture
def fixed_statvfs(monkeypatch):
    """Make the root filesystem 1000 blocks of 4 KiB with 250 free."""
    stat = SimpleNamespace(f_blocks=1000, f_bfree=250, f_frsize=4096)
    monkeypatch.setattr("hwtop.samplers.os.statvfs", lambda path: stat)
    return stat
