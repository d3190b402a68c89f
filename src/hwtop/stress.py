"""Fire-and-forget load generation with stress-ng."""

import logging
import subprocess
import threading

logger = logging.getLogger(__name__)

STRESS_NG = "/usr/bin/stress-ng"
STRESS_TIMEOUT = "10s"


def stress_command(stressor: str, workers: int, timeout: str = STRESS_TIMEOUT) -> list[str]:
    """Command line for a stressor; 0 workers means one per CPU."""
    return [STRESS_NG, f"--{stressor}", str(workers), "--timeout", timeout]


def _run(args: list[str]) -> None:
    try:
        subprocess.run(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, check=False)
    except OSError as e:
        logger.warning("cannot run %s: %s", args[0], e)


def launch_stress(stressor: str, workers: int) -> threading.Thread:
    """
    Run stress-ng in a detached daemon thread.

    Nothing waits for the command; its output is discarded and a failure to
    start it is only logged.
    """
    args = stress_command(stressor, workers)
    thread = threading.Thread(target=_run, args=(args,), daemon=True, name=f"stress-{stressor}")
    thread.start()
    return thread
