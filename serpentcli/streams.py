"""Input and output stream handling shared by commands."""

from __future__ import annotations

import sys
from typing import Any, Optional, TextIO


def _sprint(args: tuple[Any, ...]) -> str:
    """Join operands, adding a space only between two non-string operands."""
    parts: list[str] = []
    previous_is_text = True
    for index, arg in enumerate(args):
        is_text = isinstance(arg, str)
        if index > 0 and not is_text and not previous_is_text:
            parts.append(" ")
        parts.append(str(arg))
        previous_is_text = is_text
    return "".join(parts)


def _sprintln(args: tuple[Any, ...]) -> str:
    return " ".join(str(arg) for arg in args) + "\n"


def _sprintf(format: str, args: tuple[Any, ...]) -> str:
    return format % args if args else format


class StreamsMixin:
    """Output, error and input streams that fall back to the parent's.

    Set ``out``, ``err`` or ``input`` to redirect a command and all of its
    children; ``None`` means "use the parent's, or the process stream".
    """

    parent: Optional["StreamsMixin"] = None
    out: Optional[TextIO] = None
    err: Optional[TextIO] = None
    input: Optional[TextIO] = None

    def set_output(self, output: Optional[TextIO]) -> None:
        """Send both regular and error output to ``output``."""
        self.out = output
        self.err = output

    def _resolve(self, attribute: str) -> Optional[Any]:
        node: Optional[StreamsMixin] = self
        while node is not None:
            stream = getattr(node, attribute)
            if stream is not None:
                return stream
            node = node.parent
        return None

    def out_or_stdout(self) -> TextIO:
        return self._resolve("out") or sys.stdout

    def out_or_stderr(self) -> TextIO:
        return self._resolve("out") or sys.stderr

    def err_or_stderr(self) -> TextIO:
        return self._resolve("err") or sys.stderr

    def in_or_stdin(self) -> TextIO:
        return self._resolve("input") or sys.stdin

    def print(self, *args: Any) -> None:
        """Write ``args`` to the output stream, falling back to stderr."""
        self.out_or_stderr().write(_sprint(args))

    def println(self, *args: Any) -> None:
        self.print(_sprintln(args))

    def printf(self, format: str, *args: Any) -> None:
        self.print(_sprintf(format, args))

    def print_err(self, *args: Any) -> None:
        """Write ``args`` to the error stream, falling back to stderr."""
        self.err_or_stderr().write(_sprint(args))

    def print_errln(self, *args: Any) -> None:
        self.print_err(_sprintln(args))

    def print_errf(self, format: str, *args: Any) -> None:
        self.print_err(_sprintf(format, args))