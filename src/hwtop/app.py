"""hwtop - Main Textual application."""

import argparse
import logging
import platform
import sys
import time
from queue import Empty, Queue

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.logging import TextualHandler
from textual.widgets import Footer, Static

from hwtop.config import HostPaths
from hwtop.errors import HostError
from hwtop.monitor import ReportMonitor
from hwtop.report import Reporter
from hwtop.stress import launch_stress

VERSION = "1.0.0"

FASTEST_INTERVAL = 0.01
SLOWEST_INTERVAL = 10.0

SPECIAL_KEYS = """\
Special Keys:
  + : increase refresh interval
  - : decrease refresh interval
  d : toggle debug info
  c : run stress-ng cpu on one thread for 10 sec
  C : run stress-ng cpu on all threads for 10 sec
  m : run stress-ng matrix on one threads for 10 sec
  M : run stress-ng matrix on all threads for 10 sec
  r : reset min/max counters
  h : help
  q : quit"""


def format_interval(seconds: float) -> str:
    """Format a refresh interval, e.g. '2s' or '62.5ms'."""
    if seconds >= 1:
        return f"{seconds:g}s"
    return f"{seconds * 1000:g}ms"


class ReportView(Static):
    """Widget showing the last rendered report verbatim."""

    DEFAULT_CSS = """
    ReportView {
        height: 1fr;
        padding: 0 1;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize ReportView."""
        super().__init__(*args, **kwargs)
        self._report = ""

    @property
    def report(self) -> str:
        return self._report

    def update_report(self, report: str) -> None:
        """Show a new report; it is plain text, not markup."""
        self._report = report
        self.update(Text(report))


class HwtopApp(App):
    """Main hwtop application."""

    TITLE = "hwtop"
    SUB_TITLE = "CPU frequency and sensor monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #status {
        height: 2;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        Binding("escape", "quit", "Quit", show=False),
        ("plus", "slower", "Slower"),
        ("minus", "faster", "Faster"),
        ("d", "toggle_debug", "Debug"),
        ("r", "reset", "Reset"),
        Binding("c", "stress('cpu', 1)", "Stress CPU", show=False),
        Binding("C", "stress('cpu', 0)", "Stress all CPUs", show=False),
        Binding("m", "stress('matrix', 1)", "Stress matrix", show=False),
        Binding("M", "stress('matrix', 0)", "Stress all matrix", show=False),
        ("h", "help", "Help"),
        Binding("question_mark", "help", "Help", show=False),
    ]

    def __init__(self, reporter: Reporter | None = None, poll_rate: float = 1.0) -> None:
        """Initialize the HwtopApp."""
        super().__init__()
        self._update_queue: Queue[str | HostError] = Queue()
        self._monitor = ReportMonitor(self._update_queue, reporter or Reporter(), poll_rate=poll_rate)

    @property
    def reporter(self) -> Reporter:
        return self._monitor.reporter

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Static(self._status_line(), id="status")
        yield ReportView(id="report")
        yield Footer()

    def on_mount(self) -> None:
        """Start the report monitor when the app is mounted."""
        self._monitor.start()
        self.set_interval(0.05, self._check_for_updates)

    def on_unmount(self) -> None:
        self._monitor.stop()
        self.reporter.close()

    def _status_line(self) -> str:
        return (
            f"{time.strftime('%H:%M:%S')} Refresh Interval: "
            f"{format_interval(self._monitor.poll_rate)} (? for more options)"
        )

    def _check_for_updates(self) -> None:
        """Show the most recent report, or exit on a fatal host error."""
        report = None
        while True:
            try:
                item = self._update_queue.get_nowait()
            except Empty:
                break
            if isinstance(item, HostError):
                self._monitor.stop()
                self.exit(return_code=1, message=f"hwtop: {item}")
                return
            report = item

        if report is not None:
            self.query_one("#report", ReportView).update_report(report)
            self.query_one("#status", Static).update(self._status_line())

    def _set_interval(self, seconds: float) -> None:
        self._monitor.poll_rate = seconds
        self.query_one("#status", Static).update(self._status_line())
        self._monitor.refresh()

    def action_slower(self) -> None:
        """Double the refresh interval."""
        if self._monitor.poll_rate < SLOWEST_INTERVAL:
            self._set_interval(self._monitor.poll_rate * 2)

    def action_faster(self) -> None:
        """Halve the refresh interval."""
        if self._monitor.poll_rate > FASTEST_INTERVAL:
            self._set_interval(self._monitor.poll_rate / 2)

    def action_toggle_debug(self) -> None:
        """Toggle timings and unknown sensor diagnostics."""
        enabled = self.reporter.toggle_debug()
        self.notify(f"Debug: {'on' if enabled else 'off'}")
        self._monitor.refresh()

    def action_reset(self) -> None:
        """Reset min/max frequency counters."""
        self.reporter.reset()
        self._monitor.refresh()

    def action_stress(self, stressor: str, workers: int) -> None:
        """Start stress-ng for 10 seconds without waiting for it."""
        launch_stress(stressor, workers)
        self.notify(f"stress-ng --{stressor} {workers}")
        self._monitor.refresh()

    def action_help(self) -> None:
        """Show the special keys."""
        self.notify(SPECIAL_KEYS, title="hwtop", timeout=10)

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._monitor.stop()
        self.exit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hwtop",
        description="Show CPU frequencies, memory, load, root disk and sensors.",
        epilog=SPECIAL_KEYS,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-b", "--batch", action="store_true", help="batch mode: print one report and exit")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {VERSION} Python {platform.python_version()}",
    )
    return parser


def run_batch(reporter: Reporter) -> int:
    """Print a single report to stdout."""
    try:
        sys.stdout.write(reporter.render())
    except HostError as e:
        print(f"hwtop: {e}", file=sys.stderr)
        return 1
    finally:
        reporter.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for hwtop application."""
    args = build_parser().parse_args(argv)
    paths = HostPaths.from_env()

    if args.batch:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
        return run_batch(Reporter(paths))

    logging.basicConfig(level=logging.INFO, handlers=[TextualHandler()])
    app = HwtopApp(Reporter(paths))
    app.run()
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
