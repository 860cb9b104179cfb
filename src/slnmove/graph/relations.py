"""Relations - Reference descriptors and edges between projects.

This module defines the edges between project nodes:
- ReferenceKind: How a reference identifies its target
- ReferenceDescriptor: The host's description of one reference
- ReferenceEdge: A holder -> referenced edge
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PureWindowsPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slnmove.graph.ProjectNode import ProjectIdentity

NEUTRAL_CULTURE = "neutral"


class ReferenceKind(Enum):
    """How a reference names the thing it points at.

    - STRONG_NAME: Assembly identity tuple (name, version, culture, token)
    - PATH: Simple path to a project file or assembly
    """

    STRONG_NAME = "strong-name"
    PATH = "path"


@dataclass(frozen=True)
class ReferenceDescriptor:
    """A single reference as reported by the host.

    Attributes:
        kind: Whether this is a strong-name or a path reference.
        name: Assembly name (strong names) or display name (paths).
        path: Referenced file path, for PATH references.
        version: Assembly version, for STRONG_NAME references.
        culture: Assembly culture; empty means neutral.
        public_key_token: Public key token, for STRONG_NAME references.
    """

    kind: ReferenceKind
    name: str = ""
    path: str = ""
    version: str = ""
    culture: str = ""
    public_key_token: str = ""

    @classmethod
    def strong_name(
        cls,
        name: str,
        version: str,
        public_key_token: str,
        culture: str = "",
    ) -> ReferenceDescriptor:
        """Create a strong-name descriptor."""
        return cls(
            kind=ReferenceKind.STRONG_NAME,
            name=name,
            version=version,
            culture=culture,
            public_key_token=public_key_token,
        )

    @classmethod
    def from_path(cls, path: str, name: str = "") -> ReferenceDescriptor:
        """Create a path descriptor. ``name`` defaults to the file stem."""
        return cls(kind=ReferenceKind.PATH, name=name or _stem(path), path=path)

    @classmethod
    def parse_strong_name(cls, text: str) -> ReferenceDescriptor:
        """Parse ``Name, Version=1.0.0.0, Culture=neutral, PublicKeyToken=abc``.

        Raises:
            ValueError: If the text has no PublicKeyToken or it is null.
        """
        parts = [p.strip() for p in text.split(",")]
        fields: dict[str, str] = {}
        for part in parts[1:]:
            key, sep, value = part.partition("=")
            if sep:
                fields[key.strip().lower()] = value.strip()

        token = fields.get("publickeytoken", "")
        if not token or token.lower() == "null":
            raise ValueError(f"Not a strong name: {text!r}")

        culture = fields.get("culture", "")
        return cls.strong_name(
            name=parts[0],
            version=fields.get("version", ""),
            public_key_token=token,
            culture="" if culture == NEUTRAL_CULTURE else culture,
        )

    @property
    def simple_name(self) -> str:
        """Name used to match this reference against a project identity."""
        if self.kind == ReferenceKind.STRONG_NAME:
            return self.name
        return self.name or _stem(self.path)

    @property
    def effective_culture(self) -> str:
        """Culture with the empty value mapped to ``neutral``."""
        return self.culture or NEUTRAL_CULTURE

    def matches(self, identity: ProjectIdentity | str) -> bool:
        """Check if this reference points at a project identity.

        Both the declared name and the name derived from the path are
        checked, since a host may expose the same dependency either way.
        """
        return str(identity) in self.match_keys

    @property
    def match_keys(self) -> frozenset[str]:
        """Every name this reference can be matched by."""
        return frozenset(key for key in (self.name, _stem(self.path)) if key)

    def __str__(self) -> str:
        if self.kind == ReferenceKind.STRONG_NAME:
            return (
                f"{self.name}, Version={self.version}, "
                f"Culture={self.effective_culture}, PublicKeyToken={self.public_key_token}"
            )
        return self.path or self.name


@dataclass(frozen=True)
class ReferenceEdge:
    """A directed holder -> referenced edge.

    Two edges are equal when they share the holder and the referenced
    simple name, regardless of descriptor form.

    Attributes:
        holder: Identity of the project carrying the reference.
        descriptor: How the reference names its target.
    """

    holder: ProjectIdentity
    descriptor: ReferenceDescriptor

    @property
    def referenced(self) -> str:
        """Simple name of the referenced project or assembly."""
        return self.descriptor.simple_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReferenceEdge):
            return NotImplemented
        return self.holder == other.holder and self.referenced == other.referenced

    def __hash__(self) -> int:
        return hash((self.holder, self.referenced))

    def __str__(self) -> str:
        return f"{self.holder} --> {self.referenced} ({self.descriptor.kind.value})"


def _stem(path: str) -> str:
    # Project files use backslashes even when read on POSIX.
    return PureWindowsPath(path).stem if path else ""


__all__ = ["ReferenceKind", "ReferenceDescriptor", "ReferenceEdge", "NEUTRAL_CULTURE"]
