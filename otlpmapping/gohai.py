"""The gohai system-information payload and its double-encoded JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

__all__ = ["Gohai", "Payload", "ProcessesPayload", "parse_payload", "new_empty"]

_GOHAI_FIELDS = ("cpu", "filesystem", "memory", "network", "platform")


def _marshal_json(obj: Any, *, sort_keys: bool = False) -> str:
    """Compact JSON with the HTML-safe escaping used by the intake."""
    text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False, sort_keys=sort_keys)
    return (
        text.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


@dataclass
class Gohai:
    """System information: CPU, file systems, memory, network and platform."""

    cpu: Any = None
    filesystem: Any = None
    memory: Any = None
    network: Any = None
    platform: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON form of the gohai data."""
        return {name: getattr(self, name) for name in _GOHAI_FIELDS}


def _gohai_from_json(data: Any) -> Optional[Gohai]:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError("gohai payload must be a JSON object")
    values: Dict[str, Any] = {}
    for name in _GOHAI_FIELDS:
        if name in data:
            values[name] = data[name]
            continue
        for key, value in data.items():
            if key.lower() == name:
                values[name] = value
                break
    return Gohai(**values)


@dataclass
class Payload:
    """Holder of gohai data, serialised as a JSON string under "gohai"."""

    gohai: Optional[Gohai] = None

    def platform(self) -> Dict[str, Any]:
        """The gohai 'platform' map itself (mutations are kept)."""
        if self.gohai is None:
            raise ValueError("payload has no gohai data")
        if not isinstance(self.gohai.platform, dict):
            raise TypeError("gohai platform is not a map")
        return self.gohai.platform

    def to_dict(self) -> Dict[str, str]:
        """JSON form: the gohai data encoded twice, as a string."""
        inner = self.gohai.to_dict() if self.gohai is not None else None
        return {"gohai": _marshal_json(inner, sort_keys=True)}


def parse_payload(data: Union[str, bytes, Mapping[str, Any]]) -> Payload:
    """Parse a payload whose "gohai" field is a JSON-encoded string."""
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    if not isinstance(data, Mapping):
        raise ValueError("payload must be a JSON object")
    if "gohai" not in data:
        return Payload()
    encoded = data["gohai"]
    if not isinstance(encoded, str):
        raise ValueError("gohai field must be a JSON-formatted string")
    return Payload(_gohai_from_json(json.loads(encoded)))


@dataclass
class ProcessesPayload:
    """Process information for a host."""

    processes: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON form of the processes payload."""
        return {"processes": self.processes, "meta": self.meta}


def new_empty() -> Payload:
    """A payload with empty gohai data and an empty platform map."""
    return Payload(Gohai(platform={}))