from __future__ import annotations

"""Operator-facing status output.

CONTRACT
- Inputs: messages and StepResults
- Outputs:
  - Colored status lines: success (green ✓), info (yellow →), error (red ✗)
- Invariants:
  - Errors go to stderr, everything else to stdout
"""

from rich.console import Console
from rich.markup import escape

from .steps.base import StepResult, StepStatus


class Reporter:
    def __init__(self, console: Console | None = None, err_console: Console | None = None) -> None:
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓ {escape(message)}[/green]", soft_wrap=True)

    def info(self, message: str) -> None:
        self.console.print(f"[yellow]→ {escape(message)}[/yellow]", soft_wrap=True)

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]✗ {escape(message)}[/red]", soft_wrap=True)

    def plain(self, message: str = "") -> None:
        self.console.print(escape(message), highlight=False, soft_wrap=True)

    def step(self, result: StepResult) -> None:
        label = f"{result.name}: {result.detail}" if result.detail else result.name
        if result.status in (StepStatus.APPLIED, StepStatus.SKIPPED):
            self.success(label)
        elif result.status is StepStatus.DEFERRED:
            self.info(label)
        elif result.status is StepStatus.FAILED:
            self.error(label)
        else:
            self.info(label)


class QuietReporter(Reporter):
    """Reporter that records lines instead of printing them."""

    def __init__(self) -> None:
        super().__init__(Console(quiet=True), Console(quiet=True, stderr=True))
        self.lines: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.lines.append(("success", message))

    def info(self, message: str) -> None:
        self.lines.append(("info", message))

    def error(self, message: str) -> None:
        self.lines.append(("error", message))

    def plain(self, message: str = "") -> None:
        self.lines.append(("plain", message))
