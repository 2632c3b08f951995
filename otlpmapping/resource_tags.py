"""Tags derived from process and system resource attributes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

__all__ = ["ProcessAttributes", "SystemAttributes"]

ATTRIBUTE_PROCESS_EXECUTABLE_NAME = "process.executable.name"
ATTRIBUTE_PROCESS_EXECUTABLE_PATH = "process.executable.path"
ATTRIBUTE_PROCESS_COMMAND = "process.command"
ATTRIBUTE_PROCESS_COMMAND_LINE = "process.command_line"
ATTRIBUTE_OS_TYPE = "os.type"


@dataclass
class ProcessAttributes:
    """Process-identifying resource attributes."""

    executable_name: str = ""
    executable_path: str = ""
    command: str = ""
    command_line: str = ""
    pid: int = 0
    owner: str = ""

    def extract_tags(self) -> List[str]:
        """Return one tag for the first available process identifier."""
        # Only the first identifier is kept, to avoid inflating tag counts.
        for key, value in (
            (ATTRIBUTE_PROCESS_EXECUTABLE_NAME, self.executable_name),
            (ATTRIBUTE_PROCESS_EXECUTABLE_PATH, self.executable_path),
            (ATTRIBUTE_PROCESS_COMMAND, self.command),
            (ATTRIBUTE_PROCESS_COMMAND_LINE, self.command_line),
        ):
            if value:
                return [f"{key}:{value}"]
        return []


@dataclass
class SystemAttributes:
    """System resource attributes."""

    os_type: str = ""

    def extract_tags(self) -> List[str]:
        """Return the OS type tag, if set."""
        return [f"{ATTRIBUTE_OS_TYPE}:{self.os_type}"] if self.os_type else []