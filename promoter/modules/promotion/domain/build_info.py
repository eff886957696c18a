"""Build metadata as reported by the artifact repository."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


def _text(payload: Dict[str, Any], key: str, default: str = "") -> str:
    value = payload.get(key)
    if value is None:
        return default
    return str(value).strip()


@dataclass
class BuildArtifact:
    name: str
    type: str
    sha1: str = ""
    md5: str = ""

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "BuildArtifact":
        return cls(
            name=_text(payload, "name"),
            type=_text(payload, "type"),
            sha1=_text(payload, "sha1"),
            md5=_text(payload, "md5"),
        )


@dataclass
class BuildModule:
    id: str
    artifacts: List[BuildArtifact] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "BuildModule":
        return cls(
            id=_text(payload, "id"),
            artifacts=[BuildArtifact.from_dict(item) for item in payload.get("artifacts") or []],
        )


@dataclass
class BuildMetadata:
    name: str
    number: str
    modules: List[BuildModule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "BuildMetadata":
        """Parse a ``buildInfo`` object, or the response wrapping one."""
        if not isinstance(payload, dict):
            raise ValueError("build info response must be a JSON object")
        info = payload.get("buildInfo", payload)
        if not isinstance(info, dict):
            raise ValueError("buildInfo must be a JSON object")
        return cls(
            name=_text(info, "name"),
            number=_text(info, "number"),
            modules=[BuildModule.from_dict(item) for item in info.get("modules") or []],
        )
