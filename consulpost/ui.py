"""Output sinks for human-readable progress messages.

The pipeline runner hands the post-processor a ``Ui``. ``say`` is used for
headline lines, ``message`` for detail lines, ``error`` for problems.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape


@runtime_checkable
class Ui(Protocol):
    """Protocol every progress sink implements."""

    def say(self, message: str) -> None: ...

    def message(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleUi:
    """Writes progress to a Rich console, prefixed with the step name.

    Parameters
    ----------
    prefix:
        Label shown before every line (e.g. ``"consul"``).
    console:
        Target console; a new stdout console when omitted.
    """

    def __init__(self, prefix: str = "consul", console: Console | None = None) -> None:
        self._prefix = prefix
        self._console = console or Console()

    def say(self, message: str) -> None:
        self._console.print(f"[bold green]==> {self._prefix}:[/bold green] {escape(message)}")

    def message(self, message: str) -> None:
        self._console.print(f"    {self._prefix}: {escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[bold red]==> {self._prefix}:[/bold red] {escape(message)}")


class BufferedUi:
    """Collects messages in memory instead of printing them.

    Useful for runners that forward output elsewhere, and for tests.
    """

    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []

    def say(self, message: str) -> None:
        self.lines.append(("say", message))

    def message(self, message: str) -> None:
        self.lines.append(("message", message))

    def error(self, message: str) -> None:
        self.lines.append(("error", message))

    @property
    def messages(self) -> list[str]:
        """Return only the text of every collected line, in order."""
        return [text for _, text in self.lines]

    def flush(self) -> list[tuple[str, str]]:
        """Return and clear all collected lines."""
        lines = list(self.lines)
        self.lines.clear()
        return lines
