"""Semantic version parsing, formatting and bumping.

Versions follow ``MAJOR.MINOR.PATCH[-PRERELEASE][+METADATA]`` with two
deliberate relaxations for real-world tag names:

- a single leading ``v`` is stripped before parsing
- leading zeros in the numeric core are accepted (``01.2.3`` parses as 1.2.3)

Metadata is split off on the first ``+`` before the prerelease is split off
on the first ``-``, so a hyphen after the plus belongs to the metadata:
``1.0.0+build-123-x`` has no prerelease.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import IntEnum

from changerelease.exceptions import InvalidIdentifierError, MalformedVersionError

_IDENTIFIER_RE = re.compile(r"[0-9A-Za-z-]+")
_NUMERIC_RE = re.compile(r"[0-9]+")


class BumpType(IntEnum):
    """Magnitude of a version bump, ordered from no change to breaking."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()


def _split_identifiers(text: str) -> tuple[str, ...]:
    if not text:
        return ()
    return tuple(text.split("."))


def _validate_identifiers(identifiers: tuple[str, ...], field: str) -> None:
    """Check every identifier of a prerelease or metadata list.

    Raises:
        InvalidIdentifierError: On the first identifier that is invalid
    """
    for identifier in identifiers:
        if not _IDENTIFIER_RE.fullmatch(identifier):
            raise InvalidIdentifierError(identifier, field, "must match [0-9A-Za-z-]+")
        # Build metadata may keep leading zeros, prerelease numbers may not
        if (
            field == "prerelease"
            and _NUMERIC_RE.fullmatch(identifier)
            and len(identifier) > 1
            and identifier.startswith("0")
        ):
            raise InvalidIdentifierError(identifier, field, "numeric identifier has a leading zero")


def _precedence_key(identifier: str) -> tuple[int, int | str]:
    # Numeric identifiers sort before alphanumeric ones at the same position
    if _NUMERIC_RE.fullmatch(identifier):
        return (0, int(identifier))
    return (1, identifier)


@dataclass(frozen=True)
class Version:
    """An immutable semantic version.

    Equality is structural (build metadata included); ordering follows
    semantic-versioning precedence, which ignores build metadata.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            if getattr(self, name) < 0:
                raise MalformedVersionError(
                    f"{self.major}.{self.minor}.{self.patch}", f"{name} must be non-negative"
                )
        _validate_identifiers(self.prerelease, "prerelease")
        _validate_identifiers(self.build, "metadata")

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string.

        Args:
            text: Version string, optionally prefixed with ``v``

        Returns:
            Parsed version

        Raises:
            MalformedVersionError: If the string is not a valid version
        """
        remainder = text[1:] if text.startswith("v") else text

        remainder, _, build = remainder.partition("+")
        has_build = "+" in text
        core, _, prerelease = remainder.partition("-")
        has_prerelease = "-" in remainder

        parts = core.split(".")
        if len(parts) != 3:
            raise MalformedVersionError(text, "expected MAJOR.MINOR.PATCH")
        for part in parts:
            if not _NUMERIC_RE.fullmatch(part):
                raise MalformedVersionError(text, f"{part!r} is not a non-negative integer")

        if has_prerelease and not prerelease:
            raise MalformedVersionError(text, "empty prerelease")
        if has_build and not build:
            raise MalformedVersionError(text, "empty build metadata")

        try:
            return cls(
                major=int(parts[0]),
                minor=int(parts[1]),
                patch=int(parts[2]),
                prerelease=_split_identifiers(prerelease),
                build=_split_identifiers(build),
            )
        except InvalidIdentifierError as e:
            raise MalformedVersionError(text, e.message) from e

    def format(self) -> str:
        """Render the canonical string form, without a ``v`` prefix."""
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def __str__(self) -> str:
        return self.format()

    def bump(self, bump_type: BumpType) -> Version:
        """Return the next version for the given bump type.

        Prerelease and build metadata are always cleared.

        Raises:
            ValueError: If ``bump_type`` is ``BumpType.NONE``
        """
        if bump_type == BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump_type == BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if bump_type == BumpType.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Cannot bump a version by {bump_type!r}")

    def with_prerelease(self, prerelease: str) -> Version:
        """Return a copy with the prerelease replaced; ``""`` clears it.

        Raises:
            InvalidIdentifierError: If any identifier is invalid
        """
        return replace(self, prerelease=_split_identifiers(prerelease))

    def with_metadata(self, metadata: str) -> Version:
        """Return a copy with the build metadata replaced; ``""`` clears it.

        Raises:
            InvalidIdentifierError: If any identifier is invalid
        """
        return replace(self, build=_split_identifiers(metadata))

    def _precedence(self) -> tuple:
        # A release (no prerelease) outranks any of its prereleases
        return (
            self.major,
            self.minor,
            self.patch,
            0 if self.prerelease else 1,
            tuple(_precedence_key(i) for i in self.prerelease),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() <= other._precedence()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() > other._precedence()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() >= other._precedence()


def parse_version(text: str) -> Version:
    """Parse a version string. See :meth:`Version.parse`."""
    return Version.parse(text)
