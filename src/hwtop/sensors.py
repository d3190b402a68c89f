"""Temperature and fan readings from hwmon devices."""

import glob
import logging
import os

from hwtop.errors import HostError
from hwtop.models import Fan, SensorClass, SensorKind, Temp
from hwtop.reader import read_record

logger = logging.getLogger(__name__)

PAIRED = SensorClass(SensorKind.PAIRED)
UNRECOGNIZED = SensorClass(SensorKind.UNRECOGNIZED)

# Module name, as found in the device's 'name' file, to extraction method
SENSOR_CLASSES: dict[str, SensorClass] = {
    "acpitz": PAIRED,
    "nct6795": PAIRED,
    "nct6776": PAIRED,
    "thinkpad": PAIRED,
    "nouveau": PAIRED,
    "k10temp": PAIRED,
    "coretemp": PAIRED,
    "radeon": SensorClass(SensorKind.SINGLE, "GPU"),
    "iwlwifi": SensorClass(SensorKind.SINGLE, "WiFi"),
}


def classify(module: str) -> SensorClass:
    """Look up how to read a device from its module name."""
    return SENSOR_CLASSES.get(module, UNRECOGNIZED)


def _inputs(device_dir: str) -> list[str]:
    return sorted(glob.glob(os.path.join(glob.escape(device_dir), "*input")))


def _stem(path: str) -> str:
    return os.path.basename(path).removesuffix("_input")


def is_valid_temp(value: str) -> bool:
    """Empty, zero and negative readings are treated as sensor noise."""
    return value not in ("", "0") and not value.startswith("-")


def temps_and_fans(device_dir: str, module: str) -> tuple[list[Temp], list[Fan]]:
    """
    Read every temperature and fan input of a device.

    Temperatures are labelled from their companion '_label' file; fans by the
    input name, e.g. 'fan1'.
    """
    temps: list[Temp] = []
    fans: list[Fan] = []
    for path in _inputs(device_dir):
        name = os.path.basename(path)
        if name.startswith("fan"):
            fans.append(Fan(label=_stem(path), value=read_record(path)))
        elif name.startswith("temp"):
            value = read_record(path)
            if not is_valid_temp(value):
                continue
            label = read_record(path.removesuffix("_input") + "_label")
            temps.append(Temp(module=module, label=label, value=value))
    return temps, fans


def single_temp(device_dir: str, module: str, label: str) -> Temp:
    """The first temperature input of a device under a fixed label."""
    return Temp(module=module, label=label, value=read_record(os.path.join(device_dir, "temp1_input")))


def describe_inputs(device_dir: str) -> str:
    """Raw listing of a device's inputs, for diagnostics."""
    return "".join(f" {_stem(path):<14}   {read_record(path)}\n" for path in _inputs(device_dir))


def merge_readings(temps: list[Temp], fans: list[Fan]) -> str:
    """
    Lay out temperatures and fans side by side.

    Entries are paired by position; whatever remains of the longer list is
    printed alone, temperatures before fans.
    """
    paired = min(len(temps), len(fans))
    lines = [f" {temp}     {fan}\n" for temp, fan in zip(temps, fans)]
    lines.extend(f" {temp}\n" for temp in temps[paired:])
    lines.extend(f" {fan}\n" for fan in fans[paired:])
    return "".join(lines)


class SensorAggregator:
    """
    Collects readings from all hwmon devices into one listing.

    Only symbolic links under the hwmon directory are considered devices.
    """

    def __init__(self, root: str = "/sys/class/hwmon") -> None:
        self._root = root

    def devices(self) -> list[str]:
        """
        Device directories in name order; empty if the root is missing.

        Raises:
            HostError: the root exists but cannot be listed.
        """
        try:
            entries = [entry.path for entry in os.scandir(self._root) if entry.is_symlink()]
        except FileNotFoundError:
            return []
        except OSError as e:
            raise HostError(f"cannot list {self._root}: {e}") from e
        return sorted(entries)

    def collect(self, debug: bool = False) -> tuple[list[Temp], list[Fan]]:
        """
        Gather readings of every recognized device, in discovery order.

        Args:
            debug: Log the inputs of devices with an unrecognized module.
        """
        temps: list[Temp] = []
        fans: list[Fan] = []
        for device_dir in self.devices():
            module = read_record(os.path.join(device_dir, "name"))
            sensor_class = classify(module)
            if sensor_class.kind is SensorKind.PAIRED:
                device_temps, device_fans = temps_and_fans(device_dir, module)
                temps.extend(device_temps)
                fans.extend(device_fans)
            elif sensor_class.kind is SensorKind.SINGLE:
                temps.append(single_temp(device_dir, module, sensor_class.label))
            elif debug:
                logger.info("# unknown module %s\n%s", module, describe_inputs(device_dir))
        return temps, fans

    def render(self, debug: bool = False) -> str:
        temps, fans = self.collect(debug)
        return merge_readings(temps, fans)
