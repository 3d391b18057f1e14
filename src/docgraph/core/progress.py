"""Console progress reporting for graph builds.

Renders ``BuildProgress`` events with plain ``console.print()`` calls and an
in-place stderr progress bar. No Rich background threads (Progress, Live) are
used, so the reporter is safe to call from the builder's callback.
"""

import sys
import time

from rich.console import Console

from .models import BuildProgress, GraphData, ProgressPhase


class BuildProgressReporter:
    """Progress callback for ``build_graph_data`` that draws to the console.

    Example:
        reporter = BuildProgressReporter(console)
        graph = await build_graph_data(root, on_progress=reporter)
        reporter.complete(graph)
    """

    def __init__(self, console: Console, verbose: bool = False, width: int = 40):
        """Initialize the reporter.

        Args:
            console: Rich Console instance for formatted output
            verbose: Print the name of every parsed file
            width: Width of the progress bar in characters
        """
        self.console = console
        self.verbose = verbose
        self.width = width
        self.current_phase: ProgressPhase | None = None
        self._start_time = time.time()
        self._phase_start_time: float | None = None

    def __call__(self, event: BuildProgress) -> None:
        if event.phase != self.current_phase:
            self._start_phase(event.phase)

        if event.phase == ProgressPhase.SCANNING:
            sys.stderr.write(f"\r  Scanning... {event.current:,} directories")
            sys.stderr.flush()
            return

        if self.verbose and event.current_file:
            self.console.print(f"  [dim]{event.current_file}[/dim]")
        self.progress_bar(event.current, event.total, prefix="Parsing documents")

    def _start_phase(self, phase: ProgressPhase) -> None:
        if self.current_phase == ProgressPhase.SCANNING:
            sys.stderr.write("\n")
            sys.stderr.flush()
        if self._phase_start_time is not None:
            elapsed = time.time() - self._phase_start_time
            self.console.print(f"[dim]  (completed in {elapsed:.1f}s)[/dim]")

        self.current_phase = phase
        self._phase_start_time = time.time()
        self.console.print(f"\n[cyan]{phase.value.capitalize()}[/cyan]")

    def progress_bar(self, current: int, total: int, prefix: str = "") -> None:
        """Draw an inline progress bar that updates in place.

        Example output: ``Parsing documents... ━━━━━━━━━━       45% 328/730``
        """
        if total == 0:
            return

        percentage = min(100, int((current / total) * 100))
        filled_width = int((current / total) * self.width)
        bar = "━" * filled_width + " " * (self.width - filled_width)

        sys.stderr.write(f"\r  {prefix}... {bar} {percentage}% {current:,}/{total:,}")
        sys.stderr.flush()

        if current >= total:
            sys.stderr.write("\n")
            sys.stderr.flush()

    def complete(self, graph: GraphData) -> None:
        """Print the build summary."""
        if self.current_phase == ProgressPhase.SCANNING:
            sys.stderr.write("\n")
            sys.stderr.flush()

        elapsed = time.time() - self._start_time
        self.console.print(
            f"\n[green]✓ Loaded {graph.loaded_documents:,} of "
            f"{graph.total_documents:,} documents[/green]"
        )
        self.console.print(f"  Time: {elapsed:.1f}s")
        if graph.has_more:
            self.console.print("  [yellow]More documents available (use --offset)[/yellow]")
