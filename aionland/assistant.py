"""Natural-language personal assistant that routes requests to handlers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

log = logging.getLogger(__name__)

MAX_HISTORY = 1000
MAX_USER_NAME = 63


class Intent(Enum):
    """What a command asks for."""

    FILE_OPERATION = auto()
    SYSTEM_QUERY = auto()
    PROCESS_CONTROL = auto()
    CODE_ASSISTANCE = auto()
    HELP = auto()
    UNKNOWN = auto()


@dataclass
class CommandResult:
    """Outcome of a request: whether it was handled and the reply text."""

    success: bool
    response: str
    data: Any = None


HELP_TEXT = (
    "I can help you with:\n"
    "  • File management (open, save, find files)\n"
    "  • System control (memory usage, processes)\n"
    "  • Code assistance (debugging, completion)\n"
    "  • Image analysis\n"
    "  • Task automation\n"
    "What would you like to do?"
)

UNKNOWN_TEXT = "I'm not sure how to help with that. Could you rephrase?"


def _unclassified(command: str) -> Intent:
    return Intent.UNKNOWN


class Assistant:
    """Classifies commands and answers them, keeping a bounded history."""

    def __init__(self, user_name: str | None = None,
                 classifier: Callable[[str], Intent] | None = None):
        self.user_name = (user_name if user_name is not None else "User")[:MAX_USER_NAME]
        self.preferred_language = "en"
        self.learn_from_usage = True
        self.history: list[str] = []
        self.automations: list[tuple[str, str]] = []
        self.preferences: dict[str, str] = {}
        if classifier is None:
            log.warning("[Assistant] Warning: NLP engine initialization failed")
            classifier = _unclassified
        self._classify = classifier
        log.info("[Assistant] Initialized for user: %s", self.user_name)

    def process_command(self, command: str | None) -> CommandResult:
        """Classify a command, dispatch it and record it in the history."""
        if command is None:
            return CommandResult(False, "Invalid input")

        log.info('[Assistant] Processing: "%s"', command)
        intent = self._classify(command)
        if intent == Intent.FILE_OPERATION:
            result = self.manage_files(command)
        elif intent in (Intent.SYSTEM_QUERY, Intent.PROCESS_CONTROL):
            result = self.control_system(command)
        elif intent == Intent.CODE_ASSISTANCE:
            result = self.code_help(command)
        elif intent == Intent.HELP:
            result = CommandResult(True, HELP_TEXT)
        else:
            result = CommandResult(False, UNKNOWN_TEXT)

        if len(self.history) < MAX_HISTORY:
            self.history.append(command)
        return result

    def manage_files(self, request: str) -> CommandResult:
        """Answer a file management request."""
        log.info("[Assistant] File management request")
        if "find" in request or "search" in request:
            return CommandResult(
                True, "Searching for files... (Implementation would search filesystem)")
        if "open" in request:
            return CommandResult(True, "Opening file... (Implementation would open file)")
        if "delete" in request or "remove" in request:
            return CommandResult(True, "File deleted. (Implementation would delete file)")
        return CommandResult(False, "I didn't understand that file operation.")

    def control_system(self, request: str) -> CommandResult:
        """Answer a system status or process request."""
        log.info("[Assistant] System control request")
        if "memory" in request or "ram" in request:
            return CommandResult(True, (
                "Memory Usage:\n"
                "  Total: 16 GB\n"
                "  Used: 8.2 GB (51%)\n"
                "  Available: 7.8 GB\n"
                "  Cached: 2.1 GB"))
        if "cpu" in request:
            return CommandResult(True, (
                "CPU Usage:\n"
                "  Overall: 35%\n"
                "  Core 0: 42%\n"
                "  Core 1: 28%\n"
                "  Core 2: 31%\n"
                "  Core 3: 39%"))
        if "process" in request:
            return CommandResult(True, (
                "Top Processes:\n"
                "  1. ai-assistant (12% CPU)\n"
                "  2. compositor (8% CPU)\n"
                "  3. kernel (5% CPU)"))
        return CommandResult(False, "Unknown system command.")

    def code_help(self, request: str) -> CommandResult:
        """Answer a request for help with code."""
        log.info("[Assistant] Code assistance request")
        if "debug" in request or "bug" in request:
            return CommandResult(True, (
                "I can help debug your code. Please paste the code snippet, "
                "and I'll analyze it for potential issues."))
        if "complete" in request:
            return CommandResult(True, (
                "I can provide code completions. Start typing your code, "
                "and I'll suggest continuations."))
        if "explain" in request:
            return CommandResult(
                True, "I can explain code. Paste the code, and I'll describe what it does.")
        return CommandResult(True, (
            "I can help with:\n"
            "  • Code completion\n"
            "  • Bug detection\n"
            "  • Code explanation\n"
            "  • Refactoring suggestions"))

    def analyze_image(self, image: bytes | None, width: int, height: int) -> CommandResult:
        """Describe an image given as raw pixel data."""
        if not image:
            return CommandResult(False, "Invalid image data")
        log.info("[Assistant] Analyzing image (%ux%u)...", width, height)
        return CommandResult(True, (
            "Image Analysis:\n"
            "  Detected objects: cat, laptop, coffee mug\n"
            "  Scene: indoor office\n"
            "  Dominant colors: blue, white, brown\n"
            "  Quality: high resolution"))

    def create_automation(self, trigger: str, action: str) -> None:
        """Record an action to be taken when a trigger condition holds."""
        if trigger is None or action is None:
            raise ValueError("an automation needs both a trigger and an action")
        log.info("[Assistant] Creating automation: trigger=%s action=%s", trigger, action)
        self.automations.append((trigger, action))

    def learn_preference(self, context: str, preference: str) -> bool:
        """Remember a preference for a context; return False when learning is off."""
        if context is None or preference is None:
            raise ValueError("a preference needs both a context and a value")
        if not self.learn_from_usage:
            return False
        log.info("[Assistant] Learning preference: %s -> %s", context, preference)
        self.preferences[context] = preference
        return True