"""Host metadata payload for the infrastructure list."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from otlpmapping.gohai import Payload, ProcessesPayload, _marshal_json, new_empty

__all__ = ["Meta", "HostTags", "HostMetadata"]


@dataclass
class Meta:
    """Host names and aliases."""

    instance_id: str = ""
    ec2_hostname: str = ""
    hostname: str = ""
    socket_hostname: str = ""
    socket_fqdn: str = ""
    host_aliases: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """JSON form; empty optional fields are left out."""
        out: Dict[str, Any] = {}
        if self.instance_id:
            out["instance-id"] = self.instance_id
        if self.ec2_hostname:
            out["ec2-hostname"] = self.ec2_hostname
        out["hostname"] = self.hostname
        if self.socket_hostname:
            out["socket-hostname"] = self.socket_hostname
        if self.socket_fqdn:
            out["socket-fqdn"] = self.socket_fqdn
        if self.host_aliases:
            out["host_aliases"] = list(self.host_aliases)
        return out


@dataclass
class HostTags:
    """Host tags from configuration and from Google Cloud."""

    otel: List[str] = field(default_factory=list)
    gcp: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        """JSON form; empty lists are left out."""
        out: Dict[str, List[str]] = {}
        if self.otel:
            out["otel"] = list(self.otel)
        if self.gcp:
            out["google cloud platform"] = list(self.gcp)
        return out


@dataclass
class HostMetadata:
    """Metadata identifying a host as an OpenTelemetry host."""

    meta: Optional[Meta] = field(default_factory=Meta)
    internal_hostname: str = ""
    version: str = ""
    flavor: str = ""
    tags: Optional[HostTags] = field(default_factory=HostTags)
    payload: Payload = field(default_factory=new_empty)
    processes: Optional[ProcessesPayload] = None

    def platform(self) -> Dict[str, Any]:
        """The gohai platform map of this host."""
        return self.payload.platform()

    def to_dict(self) -> Dict[str, Any]:
        """JSON form of the payload, gohai data as an encoded string."""
        return {
            "meta": self.meta.to_dict() if self.meta is not None else None,
            "internalHostname": self.internal_hostname,
            "otel_version": self.version,
            "agent-flavor": self.flavor,
            "host-tags": self.tags.to_dict() if self.tags is not None else None,
            **self.payload.to_dict(),
            "resources": self.processes.to_dict() if self.processes is not None else None,
        }

    def to_json(self) -> str:
        """Compact JSON text of the payload."""
        return _marshal_json(self.to_dict())