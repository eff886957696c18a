"""Maven coordinate value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from promoter.modules.promotion.errors import FormatError


@dataclass(frozen=True)
class Coordinate:
    """Represents ``groupId:artifactId:version[:classifier]``."""

    group_id: str
    artifact_id: str
    version: str
    classifier: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> "Coordinate":
        """Create a coordinate from its colon-delimited composite form.

        Fields beyond the fourth are ignored.
        """
        if value is None:
            raise FormatError("Coordinate must not be None")
        parts = value.split(":")
        if len(parts) < 3:
            raise FormatError(f"Malformed coordinate {value!r}: expected group:artifact:version[:classifier]")
        classifier = parts[3] if len(parts) > 3 else None
        return cls(group_id=parts[0], artifact_id=parts[1], version=parts[2], classifier=classifier)

    def format(self, layout: bool = False, delimiter: str = ":") -> str:
        """Render group, artifact and version joined by ``delimiter``.

        With ``layout`` the dots of the group are replaced by slashes, as in the
        Maven repository layout. The classifier is never rendered.
        """
        group = self.group_id.replace(".", "/") if layout else self.group_id
        return delimiter.join((group, self.artifact_id, self.version))

    @property
    def repository_path(self) -> str:
        return self.format(layout=True, delimiter="/")

    def __str__(self) -> str:
        return self.format()
