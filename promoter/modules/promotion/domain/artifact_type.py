"""Artifact type classification.

A type is either one of the well-known kinds or an ad-hoc type carrying the
raw name reported by the build. Both use the same filename rule: hyphenated
names such as ``sources-jar`` match ``*-sources.jar``, plain names such as
``pom`` match ``*.pom``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple


class WellKnownType(str, Enum):
    JAR = "jar"
    POM = "pom"
    SOURCES_JAR = "sources-jar"
    JAVADOC_JAR = "javadoc-jar"
    ORIGINAL_JAR = "original-jar"


CLASSIFIER_KINDS: Tuple[WellKnownType, ...] = (
    WellKnownType.JAVADOC_JAR,
    WellKnownType.SOURCES_JAR,
    WellKnownType.ORIGINAL_JAR,
)


@dataclass(frozen=True)
class ArtifactType:
    """Named classification of an artifact file. Compared by name only."""

    canonical_name: str
    kind: Optional[WellKnownType] = field(default=None, compare=False)

    @classmethod
    def of(cls, name: str, registry: Optional["ArtifactTypes"] = None) -> "ArtifactType":
        """Look ``name`` up in ``registry`` (the well-known table by default)."""
        return (registry or ArtifactTypes.well_known()).of(name)

    @property
    def suffix(self) -> str:
        if "-" in self.canonical_name:
            return "-" + self.canonical_name.replace("-", ".")
        return "." + self.canonical_name

    @property
    def is_classifier(self) -> bool:
        return self.kind in CLASSIFIER_KINDS

    @property
    def is_plain_jar(self) -> bool:
        return self.canonical_name == WellKnownType.JAR.value

    def matches(self, filename: str) -> bool:
        return filename.lower().endswith(self.suffix)

    def __str__(self) -> str:
        return self.canonical_name


class ArtifactTypes:
    """Lookup table of known artifact types."""

    def __init__(self, types: Iterable[ArtifactType]) -> None:
        self._types: Dict[str, ArtifactType] = {item.canonical_name: item for item in types}

    def of(self, name: str) -> ArtifactType:
        known = self._types.get(name)
        if known is not None:
            return known
        return ArtifactType(name)

    def known_classifiers(self) -> Tuple[ArtifactType, ...]:
        return tuple(item for item in self._types.values() if item.is_classifier)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    @classmethod
    def well_known(cls) -> "ArtifactTypes":
        return cls(ArtifactType(kind.value, kind) for kind in WellKnownType)
