"""Code buffers, language detection and pattern-based bug detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path

log = logging.getLogger(__name__)

MAX_DIAGNOSTICS = 32
_C_WHITESPACE = " \t\n\v\f\r"


class Language(Enum):
    """Programming language of a buffer."""

    C = "c"
    CPP = "cpp"
    PYTHON = "python"
    RUST = "rust"
    JAVASCRIPT = "javascript"
    GO = "go"
    UNKNOWN = "unknown"


class Severity(IntEnum):
    """How serious a diagnostic is."""

    HINT = 0
    WARNING = 1
    ERROR = 2


@dataclass(frozen=True)
class Diagnostic:
    """A problem found on a line of a buffer (lines count from 0)."""

    line: int
    column: int
    severity: Severity
    message: str
    fix_suggestion: str


@dataclass(frozen=True)
class CodeMetrics:
    """Line counts of a buffer."""

    total_lines: int
    code_lines: int
    comment_lines: int
    blank_lines: int
    issues: int

    @property
    def comment_ratio(self) -> float:
        """Share of comment lines, in percent."""
        if self.total_lines == 0:
            return 0.0
        return self.comment_lines / self.total_lines * 100


_EXTENSIONS = {
    ".c": Language.C,
    ".h": Language.C,
    ".cpp": Language.CPP,
    ".hpp": Language.CPP,
    ".cc": Language.CPP,
    ".py": Language.PYTHON,
    ".rs": Language.RUST,
    ".js": Language.JAVASCRIPT,
    ".ts": Language.JAVASCRIPT,
    ".go": Language.GO,
}


def detect_language(filename: str) -> Language:
    """Guess the language from the text after the last dot of a file name."""
    _, dot, ext = filename.rpartition(".")
    if not dot:
        return Language.UNKNOWN
    return _EXTENSIONS.get("." + ext, Language.UNKNOWN)


@dataclass
class CodeBuffer:
    """An editable file held as a list of lines."""

    filename: str
    lines: list[str] = field(default_factory=lambda: [""])
    language: Language = Language.UNKNOWN
    modified: bool = False
    cursor_line: int = 0
    cursor_column: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @classmethod
    def from_text(cls, filename: str, text: str) -> CodeBuffer:
        """Split text into lines; a trailing newline does not add an empty line."""
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return cls(filename=filename, lines=lines, language=detect_language(filename))

    def text(self) -> str:
        """Join the lines back into text, each ended by a newline."""
        return "".join(line + "\n" for line in self.lines)


def open_file(path: str | Path) -> CodeBuffer:
    """Load a file into a buffer and analyse it; a missing file gives an empty buffer."""
    filename = str(path)
    try:
        with open(filename, encoding="utf-8", errors="replace", newline="") as handle:
            buffer = CodeBuffer.from_text(filename, handle.read())
        log.info("[AI IDE] Opened: %s (%d lines)", filename, len(buffer.lines))
    except FileNotFoundError:
        buffer = CodeBuffer(filename=filename, language=detect_language(filename))
        log.info("[AI IDE] New file: %s", filename)
    analyze_code(buffer)
    return buffer


def _line_diagnostics(buffer: CodeBuffer, index: int, text: str):
    if "->" in text and "if" not in text and "NULL" not in text:
        yield Diagnostic(index, 0, Severity.WARNING,
                         "Potential null pointer dereference",
                         "Add NULL check before dereferencing pointer")
    if "malloc" in text and "free" not in text:
        if not any("free" in later for later in buffer.lines[index + 1:]):
            yield Diagnostic(index, 0, Severity.ERROR,
                             "Potential memory leak: allocated memory not freed",
                             "Call free() when memory is no longer needed")
    if "strcpy" in text or "strcat" in text:
        yield Diagnostic(index, 0, Severity.ERROR,
                         "Unsafe string operation - buffer overflow risk",
                         "Use strncpy() or strncat() with buffer size")
    if ("int " in text or "char " in text or "float " in text) and "=" not in text:
        yield Diagnostic(index, 0, Severity.WARNING,
                         "Variable declared but not initialized",
                         "Initialize variable at declaration")
    if "/ " in text or "% " in text:
        yield Diagnostic(index, 0, Severity.WARNING,
                         "Potential division by zero",
                         "Add check to ensure divisor is not zero")


def find_bugs(buffer: CodeBuffer) -> list[Diagnostic]:
    """Scan a buffer for common C pitfalls, reporting at most 32 issues."""
    log.info("[AI IDE] Running AI bug detection on %s...", buffer.filename)
    bugs: list[Diagnostic] = []
    for index, text in enumerate(buffer.lines):
        for diagnostic in _line_diagnostics(buffer, index, text):
            if len(bugs) >= MAX_DIAGNOSTICS:
                break
            bugs.append(diagnostic)
        if len(bugs) >= MAX_DIAGNOSTICS:
            break
    log.info("[AI IDE] Found %d potential issues", len(bugs))
    return bugs


def analyze_code(buffer: CodeBuffer) -> CodeMetrics:
    """Store diagnostics on the buffer and count code, comment and blank lines."""
    buffer.diagnostics = find_bugs(buffer)
    code = comment = blank = 0
    for line in buffer.lines:
        stripped = line.lstrip(_C_WHITESPACE)
        if not stripped:
            blank += 1
        elif stripped.startswith(("//", "/*")):
            comment += 1
        else:
            code += 1
    metrics = CodeMetrics(
        total_lines=len(buffer.lines),
        code_lines=code,
        comment_lines=comment,
        blank_lines=blank,
        issues=len(buffer.diagnostics),
    )
    log.info("[AI IDE] Code metrics: %s (comments %.1f%%)", metrics, metrics.comment_ratio)
    return metrics