"""Leveled terminal output for build, test and publish runs.

Services never print directly. They take a ConsoleProtocol so the same
pipeline writes through Rich on a terminal and into MockConsole in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from rich.console import Console
from rich.text import Text

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Message level; the value is the prefix shown before the text."""

    SUCCESS = "OK"
    INFO = "info:"
    WARNING = "warning:"
    ERROR = "error:"
    HINT = "hint:"

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    def success(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def hint(self, message: str) -> None: ...


_RICH_MARKUP: dict[Style, str] = {
    Style.SUCCESS: "green",
    Style.INFO: "cyan",
    Style.WARNING: "yellow",
    Style.ERROR: "red bold",
    Style.HINT: "dim",
}


class RichConsole:
    """Rich-backed console.

    Warnings, errors and hints go to stderr so `cookimg build > log`
    still shows what went wrong.
    """

    def __init__(self) -> None:
        self._out = Console(highlight=False)
        self._err = Console(stderr=True, highlight=False)

    def _emit(self, style: Style, message: str) -> None:
        target = self._out if style in (Style.SUCCESS, Style.INFO) else self._err
        color = _RICH_MARKUP[style]
        body = (message, color) if style is Style.HINT else message
        target.print(Text.assemble((style.value, color), " ", body))

    def success(self, message: str) -> None:
        self._emit(Style.SUCCESS, message)

    def info(self, message: str) -> None:
        self._emit(Style.INFO, message)

    def warning(self, message: str) -> None:
        self._emit(Style.WARNING, message)

    def error(self, message: str) -> None:
        self._emit(Style.ERROR, message)

    def hint(self, message: str) -> None:
        self._emit(Style.HINT, message)


@dataclass(frozen=True, slots=True)
class OutputRecord:
    message: str
    style: Style


@dataclass
class MockConsole:
    """Records every line (with its prefix) instead of printing."""

    outputs: list[OutputRecord] = field(default_factory=list[OutputRecord])

    def _record(self, style: Style, message: str) -> None:
        self.outputs.append(OutputRecord(f"{style.value} {message}", style))

    def success(self, message: str) -> None:
        self._record(Style.SUCCESS, message)

    def info(self, message: str) -> None:
        self._record(Style.INFO, message)

    def warning(self, message: str) -> None:
        self._record(Style.WARNING, message)

    def error(self, message: str) -> None:
        self._record(Style.ERROR, message)

    def hint(self, message: str) -> None:
        self._record(Style.HINT, message)

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style is Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style is style)
