"""Text-mode console with a VGA-style cell buffer, line input and command dispatch."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import IntEnum

log = logging.getLogger(__name__)

VGA_WIDTH = 80
VGA_HEIGHT = 25
INPUT_BUFFER_SIZE = 256

_RULE = "=" * 80 + "\n"

_BANNER_ART = (
    r"     _    ___ ___  _   _    ___  ____     __     __  ___   ___  " "\n"
    r"    / \  |_ _/ _ \| \ | |  / _ \/ ___|    \ \   / / |_ _| / _ \ " "\n"
    r"   / _ \  | | | | |  \| | | | | \___ \     \ \ / /   | | | | | |" "\n"
    r"  / ___ \ | | |_| | |\  | | |_| |___) |     \ V /    | | | |_| |" "\n"
    r" /_/   \_\___\___/|_| \_|  \___/|____/       \_/    |___(_)___/ " "\n"
)


class Color(IntEnum):
    """The sixteen text-mode colours."""

    BLACK = 0
    BLUE = 1
    GREEN = 2
    CYAN = 3
    RED = 4
    MAGENTA = 5
    BROWN = 6
    LIGHT_GREY = 7
    DARK_GREY = 8
    LIGHT_BLUE = 9
    LIGHT_GREEN = 10
    LIGHT_CYAN = 11
    LIGHT_RED = 12
    LIGHT_MAGENTA = 13
    YELLOW = 14
    WHITE = 15


def make_color(fg: Color | int, bg: Color | int) -> int:
    """Pack a foreground and background colour into one attribute byte."""
    return (int(fg) & 0x0F) | ((int(bg) & 0x0F) << 4)


def make_vga_entry(char: str, color: int) -> int:
    """Pack a character and an attribute byte into one 16-bit cell."""
    code = ord(char)
    if code > 0xFF:
        code = ord("?")
    return code | ((color & 0xFF) << 8)


DEFAULT_COLOR = make_color(Color.WHITE, Color.BLACK)


class Terminal:
    """An 80x25 character screen that collects a line of input and dispatches it.

    ``execute`` runs a command line and may return text to print.
    ``natural_language`` answers a query that ``is_natural`` recognises and may
    return text to print; without either of them every line goes to ``execute``.
    """

    def __init__(self,
                 execute: Callable[[str], str | None] | None = None,
                 natural_language: Callable[[str], str | None] | None = None,
                 is_natural: Callable[[str], bool] | None = None):
        self._execute = execute
        self._natural_language = natural_language
        self._is_natural = is_natural
        self.color = DEFAULT_COLOR
        self.row = 0
        self.column = 0
        self.buffer = [make_vga_entry(" ", self.color)] * (VGA_WIDTH * VGA_HEIGHT)
        self._input: list[str] = []
        self.clear()
        log.info("[TERMINAL] Terminal initialized")

    @property
    def input(self) -> str:
        """The line typed so far."""
        return "".join(self._input)

    def set_color(self, color: int) -> None:
        """Set the attribute used for characters written from now on."""
        self.color = color & 0xFF

    def clear(self) -> None:
        """Blank the screen in the current colour and home the cursor."""
        blank = make_vga_entry(" ", self.color)
        self.buffer = [blank] * (VGA_WIDTH * VGA_HEIGHT)
        self.row = 0
        self.column = 0

    def putchar(self, char: str) -> None:
        """Write one character, wrapping at the right edge and scrolling at the bottom."""
        if char == "\n":
            self.column = 0
            self.row += 1
        else:
            self.buffer[self.row * VGA_WIDTH + self.column] = make_vga_entry(char, self.color)
            self.column += 1
            if self.column >= VGA_WIDTH:
                self.column = 0
                self.row += 1
        if self.row >= VGA_HEIGHT:
            self.scroll()

    def write(self, text: str) -> None:
        """Write a string character by character."""
        for char in text:
            self.putchar(char)

    def scroll(self) -> None:
        """Move every line up by one and blank the bottom line."""
        blank = make_vga_entry(" ", self.color)
        self.buffer = self.buffer[VGA_WIDTH:] + [blank] * VGA_WIDTH
        self.row = VGA_HEIGHT - 1

    def backspace(self) -> None:
        """Step the cursor back one cell, into the previous line if needed, and blank it."""
        if self.column > 0:
            self.column -= 1
        elif self.row > 0:
            self.row -= 1
            self.column = VGA_WIDTH - 1
        else:
            return
        self.buffer[self.row * VGA_WIDTH + self.column] = make_vga_entry(" ", self.color)

    def cell(self, row: int, column: int) -> tuple[str, int]:
        """The character and attribute at a screen position."""
        if not (0 <= row < VGA_HEIGHT and 0 <= column < VGA_WIDTH):
            raise IndexError(f"cell ({row}, {column}) is off screen")
        entry = self.buffer[row * VGA_WIDTH + column]
        return chr(entry & 0xFF), entry >> 8

    def row_text(self, row: int) -> str:
        """The characters of a screen row without trailing blanks."""
        if not 0 <= row < VGA_HEIGHT:
            raise IndexError(f"row {row} is off screen")
        start = row * VGA_WIDTH
        return "".join(chr(e & 0xFF) for e in self.buffer[start:start + VGA_WIDTH]).rstrip(" ")

    def print_banner(self) -> None:
        """Print the welcome banner."""
        self.set_color(make_color(Color.CYAN, Color.BLACK))
        self.write(_RULE)
        self.write(_BANNER_ART)
        self.write("\n")
        self.set_color(make_color(Color.GREEN, Color.BLACK))
        self.write(" AI-Powered Operating System v1.0.0\n")
        self.set_color(DEFAULT_COLOR)
        self.write(_RULE + "\n")
        self.write("Welcome to AION OS! Type 'help' for commands or use natural language.\n")
        self.write('AI Assistant is ready. Try: "show me system information"\n\n')

    def print_prompt(self) -> None:
        """Print the coloured shell prompt."""
        for text, fg in (("aion", Color.GREEN), ("@", Color.WHITE),
                         ("localhost", Color.CYAN), (":~$ ", Color.WHITE)):
            self.set_color(make_color(fg, Color.BLACK))
            self.write(text)

    def _wants_ai(self, line: str) -> bool:
        return (self._natural_language is not None
                and self._is_natural is not None
                and self._is_natural(line))

    def _handle_ai_command(self, line: str) -> None:
        self.set_color(make_color(Color.MAGENTA, Color.BLACK))
        self.write(f"[AI] Processing: {line}\n")
        response = self._natural_language(line)
        if response:
            self.set_color(make_color(Color.YELLOW, Color.BLACK))
            self.write(f"[AI] {response}\n")
        self.set_color(DEFAULT_COLOR)

    def _run_command(self, line: str) -> None:
        if self._execute is None:
            return
        output = self._execute(line)
        if output:
            self.write(output)

    def process_input(self, char: str) -> None:
        """Handle one typed character: newline dispatches, backspace deletes, others echo."""
        if char == "\n":
            self.write("\n")
            line = self.input
            if self._wants_ai(line):
                self._handle_ai_command(line)
            else:
                self._run_command(line)
            self._input.clear()
            self.print_prompt()
        elif char == "\b":
            if self._input:
                self._input.pop()
                self.backspace()
        elif len(self._input) < INPUT_BUFFER_SIZE - 1:
            self._input.append(char)
            self.putchar(char)