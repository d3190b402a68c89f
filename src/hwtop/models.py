"""Data models for hwtop."""

import re
from dataclasses import dataclass
from enum import Enum

DECIMAL = re.compile(r"[+-]?\d+", re.ASCII)


def parse_int(text: str) -> int:
    """Parse a plain decimal integer: optional sign and ASCII digits only."""
    if not DECIMAL.fullmatch(text):
        raise ValueError(f"invalid decimal integer: {text!r}")
    return int(text)


@dataclass(slots=True, frozen=True)
class CoreFrequencySample:
    """Frequency of one physical core in a single cpuinfo scan."""

    core_id: int
    mhz: float
    bar: str
    min_mhz: float = 0.0  # bounds right after this sample was folded in
    max_mhz: float = 0.0


@dataclass(slots=True, frozen=True)
class LoadAverage:
    """Fields of the load average line, kept verbatim."""

    one: str
    five: str
    fifteen: str
    entities: str  # runnable/total scheduling entities, e.g. '1/371'
    last_pid: str

    def __str__(self) -> str:
        return f" {self.one} {self.five} {self.fifteen} {self.entities} {self.last_pid}"


@dataclass(slots=True, frozen=True)
class DiskUsage:
    """Usage of the root filesystem."""

    device: str
    size: int  # Bytes
    used: int
    free: int


@dataclass(slots=True, frozen=True)
class Temp:
    """A temperature input of a hwmon device."""

    module: str
    label: str
    value: str  # millidegrees Celsius as read, may be empty

    def __str__(self) -> str:
        label = self.label or self.module
        if not self.value:
            value = "    -"
        else:
            try:
                value = f"{parse_int(self.value) / 1000:5.1f}"
            except ValueError as e:
                # Shown in place of the reading to help diagnose the device
                value = str(e)
        return f"{label:<14}   {value} °C"


@dataclass(slots=True, frozen=True)
class Fan:
    """A fan speed input of a hwmon device."""

    label: str
    value: str  # rpm as read, may be empty

    def __str__(self) -> str:
        return f"{self.label:<10}   {self.value or '-':>4} rpm"


class SensorKind(Enum):
    """How readings are extracted from a hwmon device."""

    PAIRED = "paired"  # every temp*/fan* input of the device
    SINGLE = "single"  # temp1_input only, under a fixed label
    UNRECOGNIZED = "unrecognized"


@dataclass(slots=True, frozen=True)
class SensorClass:
    """Classification of a hwmon device by its module name."""

    kind: SensorKind
    label: str = ""
