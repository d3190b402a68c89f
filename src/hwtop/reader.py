"""Bounded reads of small pseudo-files."""

RECORD_SIZE = 128


def read_record(path: str) -> str:
    """
    Read one short record from a sysfs/procfs attribute.

    Returns an empty string when the file does not exist, which is the normal
    case for optional hardware attributes. Other I/O failures are returned as
    their error text, since callers only ever display the result.
    """
    try:
        with open(path, "rb") as f:
            data = f.read(RECORD_SIZE)
    except FileNotFoundError:
        return ""
    except OSError as e:
        return str(e)
    return data.decode("utf-8", errors="replace").strip()
