"""Background sampling loop for hwtop."""

import logging
import threading
from queue import Queue

from hwtop.errors import HostError
from hwtop.report import Reporter

logger = logging.getLogger(__name__)

MIN_POLL_RATE = 0.005
MAX_POLL_RATE = 20.0


class ReportMonitor:
    """
    Renders reports in a daemon thread and pushes them to a thread-safe Queue.

    The thread is the only one calling Reporter.render(). A HostError stops
    the loop and is pushed to the queue in place of a report so the consumer
    can terminate the program; any other exception is wrapped in a HostError
    and handled the same way.
    """

    def __init__(
        self,
        update_queue: "Queue[str | HostError]",
        reporter: Reporter,
        poll_rate: float = 1.0,
    ) -> None:
        """
        Initialize the ReportMonitor.

        Args:
            update_queue: Thread-safe queue to push reports to.
            reporter: Renders the report on every tick.
            poll_rate: Seconds between reports. Default 1.0s.
        """
        self._queue = update_queue
        self._reporter = reporter
        self._poll_rate = poll_rate
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def reporter(self) -> Reporter:
        return self._reporter

    @property
    def poll_rate(self) -> float:
        """Get the current poll rate."""
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        """Set the poll rate, clamped to a sane range."""
        self._poll_rate = min(MAX_POLL_RATE, max(MIN_POLL_RATE, value))

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the monitoring thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="ReportMonitor",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the monitoring thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        self._wake_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def refresh(self) -> None:
        """Render the next report now instead of at the end of the interval."""
        self._wake_event.set()

    def _poll_loop(self) -> None:
        """Main polling loop running in the background thread."""
        while not self._stop_event.is_set():
            try:
                report = self._reporter.render()
            except HostError as e:
                logger.error("%s", e)
                self._queue.put(e)
                return
            except Exception as e:
                # Any other failure also ends the loop; the consumer must not wait forever
                logger.exception("sampling failed")
                self._queue.put(HostError(f"sampling failed: {e}"))
                return
            self._queue.put(report)

            # Wait for poll_rate seconds, a refresh request or a stop request
            self._wake_event.wait(timeout=self._poll_rate)
            self._wake_event.clear()
