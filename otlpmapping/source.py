"""Telemetry sources: what emitted a signal and how it is identified."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass

__all__ = ["Kind", "Source", "Provider"]


class Kind(str, enum.Enum):
    """Kind of telemetry source."""

    INVALID = ""
    HOSTNAME = "host"
    AWS_ECS_FARGATE = "task_arn"


@dataclass(frozen=True)
class Source:
    """A telemetry source: its kind and the identifier that determines it."""

    kind: Kind = Kind.INVALID
    identifier: str = ""

    def tag(self) -> str:
        """Tag associated with this source."""
        return f"{self.kind.value}:{self.identifier}"


class Provider(abc.ABC):
    """Something that can tell which source the current process is."""

    @abc.abstractmethod
    def source(self) -> Source:
        """Return the current source."""