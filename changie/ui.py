"""Coloured terminal output and a small interactive message view."""

from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TextIO

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - platforms without termios
    termios = None  # type: ignore[assignment]
    tty = None  # type: ignore[assignment]

log = logging.getLogger(__name__)

COLORS: dict[str, str] = {
    "black": "#000000",
    "red": "#FF0000",
    "green": "#00FF00",
    "yellow": "#FFFF00",
    "blue": "#0000FF",
    "magenta": "#FF00FF",
    "cyan": "#00FFFF",
    "white": "#FFFFFF",
}

EXIT_HINT = "Press 'q' or 'CTRL-C' to exit."

_KEY_NAMES = {"\x03": "ctrl+c", "\x1b": "esc"}
_QUIT_KEYS = frozenset({"q", "ctrl+c", "esc"})


class InvalidColorError(ValueError):
    """Raised when a colour name is not one of the known colours."""


def get_color(name: str) -> str:
    """Return the hex value of a named colour."""
    try:
        return COLORS[name]
    except KeyError:
        log.error("Failed to get color: invalid color: %s", name)
        raise InvalidColorError(f"invalid color: {name}") from None


def _style(text: str, hex_color: str) -> str:
    red, green, blue = (int(hex_color[i : i + 2], 16) for i in (1, 3, 5))
    return f"\x1b[1;38;2;{red};{green};{blue}m{text}\x1b[0m"


def _supports_color(out: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(out, "isatty", None)
    return bool(isatty and isatty())


def print_colored_message(out: TextIO, message: str, color: str) -> None:
    """Write ``message`` in bold ``color`` followed by a newline.

    Colour codes are only emitted when ``out`` is a terminal.
    """
    log.debug("PrintColoredMessage called message=%s color=%s", message, color)
    try:
        hex_color = get_color(color)
    except InvalidColorError as exc:
        raise InvalidColorError(f"invalid color: {exc}") from exc

    text = _style(message, hex_color) if _supports_color(out) else message
    try:
        out.write(text + "\n")
    except OSError:
        log.error("Failed to write message: %s", message)
        raise
    log.debug("PrintColoredMessage completed successfully")


@dataclass
class Model:
    """A message shown until a quit key is pressed."""

    message: str
    color: str | None = None
    done: bool = False

    def view(self) -> str:
        text = _style(self.message, self.color) if self.color else self.message
        return f"{text}\n\n{EXIT_HINT}"

    def update(self, key: str) -> tuple[Model, bool]:
        """Handle a key; return the model and whether the view should quit.

        ``key`` is a key name (``"q"``, ``"ctrl+c"``, ``"esc"``) or the raw
        character typed.
        """
        name = _KEY_NAMES.get(key, key)
        return self, name in _QUIT_KEYS


class UIRunner(ABC):
    """Something that can show a coloured message to the user."""

    @abstractmethod
    def run_ui(self, message: str, color: str) -> None:
        """Show ``message`` in ``color``; raise on failure."""


def _read_keys(stream: TextIO) -> Iterator[str]:
    fileno = getattr(stream, "fileno", None)
    if termios is not None and stream.isatty() and fileno is not None:
        fd = fileno()
        saved = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            while True:
                data = os.read(fd, 1)
                if not data:
                    return
                yield data.decode("utf-8", errors="replace")
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
    else:
        while char := stream.read(1):
            yield char


class DefaultUIRunner(UIRunner):
    """Shows the message on a terminal and waits for a quit key."""

    def __init__(self, input: TextIO | None = None, output: TextIO | None = None) -> None:
        self.input = input
        self.output = output

    def run_ui(self, message: str, color: str) -> None:
        try:
            hex_color = get_color(color)
        except InvalidColorError:
            log.error("Failed to get color style message=%s color=%s", message, color)
            raise

        model = Model(message=message, color=hex_color)
        source = self.input if self.input is not None else sys.stdin
        sink = self.output if self.output is not None else sys.stdout

        sink.write(model.view() + "\n")
        sink.flush()
        try:
            for key in _read_keys(source):
                model, quit_now = model.update(key)
                if quit_now:
                    break
        except KeyboardInterrupt:
            pass
        except OSError:
            log.error("Failed to run UI message=%s color=%s", message, color)
            raise
        log.info("UI ran successfully message=%s color=%s", message, color)


@dataclass
class MockUIRunner(UIRunner):
    """Records the arguments it was called with and raises a preset error."""

    called_with_message: str = ""
    called_with_color: str = ""
    return_error: Exception | None = None

    def run_ui(self, message: str, color: str) -> None:
        self.called_with_message = message
        self.called_with_color = color
        if self.return_error is not None:
            raise self.return_error