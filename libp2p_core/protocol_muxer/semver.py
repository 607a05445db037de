"""
Semantic-version aware protocol ids.

Protocol ids exchanged during stream negotiation look like ``/echo/1.0.0`` or
``/ipfs/id/push/1.0.0``: a slash separated name optionally followed by a
``major.minor.patch`` segment. This module splits such ids into a name and a
version constraint and decides whether two ids are compatible.
"""

from collections.abc import (
    Iterable,
)
from dataclasses import (
    dataclass,
)
from enum import (
    Enum,
)
import logging
from typing import (
    Union,
)

from libp2p_core.custom_types import (
    TProtocol,
)

from .exceptions import (
    ProtocolParseError,
)

logger = logging.getLogger("libp2p_core.protocol_muxer.semver")


class ConstraintKind(Enum):
    EXACT = "exact"
    FROM = "from"
    UP_TO_NEXT_MINOR = "up_to_next_minor"
    UP_TO_NEXT_MAJOR = "up_to_next_major"


@dataclass(frozen=True)
class ProtocolVersion:
    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for component in (self.major, self.minor, self.patch):
            if isinstance(component, bool) or not isinstance(component, int):
                raise TypeError(f"version components must be int, got {component!r}")
            if component < 0:
                raise ValueError(f"version components must be >= 0, got {component}")

    @classmethod
    def parse(cls, version: str) -> "ProtocolVersion":
        """
        Parse ``"major.minor.patch"``.

        :raises ProtocolParseError: unless ``version`` is exactly three
            dot-separated non-negative decimal integers.
        """
        parts = version.split(".")
        if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
            raise ProtocolParseError(f"malformed protocol version {version!r}")
        major, minor, patch = (int(p) for p in parts)
        return cls(major, minor, patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class VersionConstraint:
    """
    A concrete version together with the range of versions it accepts.

    - ``EXACT`` accepts only the identical version.
    - ``FROM`` and ``UP_TO_NEXT_MAJOR`` accept any version with the same major.
    - ``UP_TO_NEXT_MINOR`` accepts any version with the same major and minor.
    """

    kind: ConstraintKind
    version: ProtocolVersion

    @classmethod
    def exact(cls, version: ProtocolVersion) -> "VersionConstraint":
        return cls(ConstraintKind.EXACT, version)

    @classmethod
    def from_version(cls, version: ProtocolVersion) -> "VersionConstraint":
        return cls(ConstraintKind.FROM, version)

    @classmethod
    def up_to_next_minor(cls, version: ProtocolVersion) -> "VersionConstraint":
        return cls(ConstraintKind.UP_TO_NEXT_MINOR, version)

    @classmethod
    def up_to_next_major(cls, version: ProtocolVersion) -> "VersionConstraint":
        return cls(ConstraintKind.UP_TO_NEXT_MAJOR, version)

    def accepts(self, other: ProtocolVersion) -> bool:
        v = self.version
        if self.kind is ConstraintKind.EXACT:
            return v == other
        if self.kind is ConstraintKind.UP_TO_NEXT_MINOR:
            return v.major == other.major and v.minor == other.minor
        # FROM and UP_TO_NEXT_MAJOR only pin the major version
        return v.major == other.major

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True)
class SemVerProtocol:
    """
    A protocol name plus an optional version constraint.

    ``name`` always starts with ``/`` and never carries the version segment:
    a name whose last segment contains a ``.`` is rejected, use ``parse`` for
    a full protocol id.
    Passing a bare ``ProtocolVersion`` as ``version`` pins it with an
    ``EXACT`` constraint.
    """

    name: str
    version: VersionConstraint | None = None

    def __post_init__(self) -> None:
        if not self.name.startswith("/"):
            object.__setattr__(self, "name", f"/{self.name}")
        if "." in self.name.rsplit("/", 1)[-1]:
            raise ProtocolParseError(
                f"protocol name {self.name!r} ends with a version segment"
            )
        if isinstance(self.version, ProtocolVersion):
            object.__setattr__(self, "version", VersionConstraint.exact(self.version))

    @classmethod
    def parse(cls, protocol: str) -> "SemVerProtocol":
        """
        Split a protocol id such as ``/echo/1.0.0`` into name and version.

        A trailing segment containing a ``.`` must be a valid
        ``major.minor.patch`` triple; it is never silently treated as part of
        the name.

        :raises ProtocolParseError: if ``protocol`` is shorter than two
            characters or its version segment is malformed.
        """
        if len(protocol) < 2:
            raise ProtocolParseError(f"protocol id too short: {protocol!r}")

        stripped = protocol[1:] if protocol.startswith("/") else protocol
        segments = [segment for segment in stripped.split("/") if segment]

        version = None
        if segments and "." in segments[-1]:
            try:
                version = VersionConstraint.exact(ProtocolVersion.parse(segments[-1]))
            except ProtocolParseError as e:
                raise ProtocolParseError(
                    f"failed to parse version from protocol id {protocol!r}"
                ) from e
            segments.pop()

        return cls("/" + "/".join(segments), version)

    def matches(self, other: "SemVerProtocol") -> bool:
        """
        Return whether ``self`` and ``other`` can talk to each other.

        Names must be identical. An unversioned protocol only matches another
        unversioned one. When both are versioned, it is enough for either
        side's constraint to accept the other side's version.
        """
        if self.name != other.name:
            return False
        if self.version is None or other.version is None:
            return self.version is None and other.version is None
        return self.version.accepts(other.version.version) or other.version.accepts(
            self.version.version
        )

    @property
    def string_value(self) -> TProtocol:
        if self.version is None:
            return TProtocol(self.name)
        return TProtocol(f"{self.name}/{self.version}")

    def __str__(self) -> str:
        return self.string_value


ProtocolLike = Union[SemVerProtocol, str]


def parse(protocol: str) -> SemVerProtocol:
    return SemVerProtocol.parse(protocol)


def _coerce(protocol: ProtocolLike) -> SemVerProtocol:
    if isinstance(protocol, SemVerProtocol):
        return protocol
    return SemVerProtocol.parse(protocol)


def match(a: ProtocolLike, b: ProtocolLike) -> bool:
    """
    Return whether two protocols are compatible.

    Strings are parsed first; a malformed version suffix raises
    ``ProtocolParseError`` rather than counting as a mismatch.
    """
    return _coerce(a).matches(_coerce(b))


def first_matching(
    offered: Iterable[ProtocolLike], supported: Iterable[ProtocolLike]
) -> SemVerProtocol | None:
    """
    Return the first protocol in ``offered`` that matches any protocol in
    ``supported``, or ``None`` when there is no overlap.
    """
    candidates = [_coerce(p) for p in supported]
    for protocol in offered:
        proposal = _coerce(protocol)
        if any(proposal.matches(candidate) for candidate in candidates):
            logger.debug("selected protocol %s", proposal)
            return proposal
    return None
