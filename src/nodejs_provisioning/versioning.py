"""Three-part NodeJS versions and interval version ranges.

Versions are strictly numeric ``major.minor.micro`` triples; there is no
pre-release or build metadata. Ranges follow interval notation with
independently open or closed endpoints:

    range    ::= interval | atleast
    interval ::= ('[' | '(') left ',' right (']' | ')')
    atleast  ::= version

Examples:
    "[0.8.6,0.9.0)"  0.8.6 <= v < 0.9.0
    "(5,6.2]"        5.0.0 <  v <= 6.2.0
    "4.0.0"          v >= 4.0.0
"""

import re
from dataclasses import dataclass
from functools import cached_property
from typing import ClassVar, Optional, Union

from .errors import FormatError

SEPARATOR = "."

LEFT_OPEN = "("
LEFT_CLOSED = "["
RIGHT_OPEN = ")"
RIGHT_CLOSED = "]"
ENDPOINT_DELIMITER = ","

_NUMBER_RE = re.compile(r"[0-9]+")
_INTERVAL_RE = re.compile(
    r"^\s*([\[(])\s*([^,\s\[\]()]+)\s*,\s*([^,\s\[\]()]+)\s*([\])])\s*$"
)


def _parse_components(version: str, strict: bool) -> tuple[int, int, int]:
    parts = version.split(SEPARATOR)
    if len(parts) > 3 or (strict and len(parts) != 3):
        raise FormatError(f'invalid version "{version}": invalid format')

    numbers = []
    for part in parts:
        if not _NUMBER_RE.fullmatch(part):
            raise FormatError(f'invalid version "{version}": non-numeric "{part}"')
        numbers.append(int(part))

    while len(numbers) < 3:
        numbers.append(0)
    return numbers[0], numbers[1], numbers[2]


@dataclass(frozen=True, order=True)
class Version:
    """Immutable ``major.minor.micro`` version, ordered component-wise."""
    major: int
    minor: int
    micro: int

    EMPTY: ClassVar["Version"]

    def __post_init__(self):
        for name in ("major", "minor", "micro"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise FormatError(
                    f"invalid version component {name}: {value!r} is not an integer"
                )
            if value < 0:
                raise FormatError(
                    f'invalid version "{self.major}.{self.minor}.{self.micro}": '
                    f'negative number "{value}"'
                )

    @classmethod
    def parse(cls, version: str) -> "Version":
        """Parse a strict ``N.N.N`` version string.

        Leading zeros are accepted and normalised, so ``"01.2.3"`` parses to
        the same value as ``"1.2.3"``.

        Raises:
            FormatError: If there are not exactly three numeric components
        """
        if version is None:
            raise FormatError("invalid version None: invalid format")
        major, minor, micro = _parse_components(version, strict=True)
        return cls(major, minor, micro)

    @classmethod
    def parse_lenient(cls, version: Optional[str]) -> "Version":
        """Parse ``major[.minor[.micro]]``, padding missing parts with zero.

        A blank or ``None`` input yields :attr:`Version.EMPTY`. Surrounding
        whitespace is ignored, whitespace inside the version is not.
        """
        value = version.strip() if version is not None else ""
        if not value:
            return cls.EMPTY
        major, minor, micro = _parse_components(value, strict=False)
        return cls(major, minor, micro)

    @cached_property
    def _text(self) -> str:
        return f"{self.major}{SEPARATOR}{self.minor}{SEPARATOR}{self.micro}"

    def __str__(self) -> str:
        return self._text


Version.EMPTY = Version(0, 0, 0)


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings; negative, zero or positive like ``cmp``."""
    left = Version.parse_lenient(a)
    right = Version.parse_lenient(b)
    return (left > right) - (left < right)


VersionLike = Union[Version, str]


def _as_version(version: VersionLike) -> Version:
    if isinstance(version, Version):
        return version
    return Version.parse_lenient(version)


@dataclass(frozen=True, eq=False)
class VersionRange:
    """Interval of versions with open or closed endpoints.

    Attributes:
        left: Lower endpoint, always present
        left_closed: Whether ``left`` itself is included
        right: Upper endpoint, ``None`` for no upper bound
        right_closed: Whether ``right`` itself is included (ignored when unbounded)
    """
    left: Version
    left_closed: bool = True
    right: Optional[Version] = None
    right_closed: bool = False

    def __post_init__(self):
        if not isinstance(self.left, Version):
            raise FormatError(f"range left endpoint must be a Version, got {type(self.left).__name__}")
        if self.right is not None and not isinstance(self.right, Version):
            raise FormatError(f"range right endpoint must be a Version, got {type(self.right).__name__}")
        if self.right is None:
            if not self.left_closed:
                raise FormatError("unbounded range must include its left endpoint")
            object.__setattr__(self, "right_closed", False)

    @classmethod
    def parse(cls, range_string: str) -> "VersionRange":
        """Parse a range in interval or at-least notation.

        Raises:
            FormatError: If delimiters are mismatched, endpoints are not
                numeric, or anything trails the closing delimiter
        """
        if range_string is None or not range_string.strip():
            raise FormatError(f'invalid range "{range_string}": invalid format')

        stripped = range_string.strip()
        try:
            if stripped[0] not in (LEFT_OPEN, LEFT_CLOSED):
                return cls(left=Version.parse_lenient(stripped))

            match = _INTERVAL_RE.match(range_string)
            if match is None:
                raise FormatError("invalid format")
            left_delim, left, right, right_delim = match.groups()
            return cls(
                left=Version.parse_lenient(left),
                left_closed=left_delim == LEFT_CLOSED,
                right=Version.parse_lenient(right),
                right_closed=right_delim == RIGHT_CLOSED,
            )
        except FormatError as e:
            raise FormatError(f'invalid range "{range_string}": {e}') from e

    @classmethod
    def at_least(cls, version: VersionLike) -> "VersionRange":
        """Range of every version greater than or equal to ``version``."""
        return cls(left=_as_version(version))

    @classmethod
    def exactly(cls, version: VersionLike) -> "VersionRange":
        """Degenerate closed range matching only ``version``."""
        v = _as_version(version)
        return cls(left=v, left_closed=True, right=v, right_closed=True)

    @property
    def left_type(self) -> str:
        return LEFT_CLOSED if self.left_closed else LEFT_OPEN

    @property
    def right_type(self) -> str:
        return RIGHT_CLOSED if self.right_closed else RIGHT_OPEN

    @cached_property
    def empty(self) -> bool:
        """True if no version can satisfy this range."""
        if self.right is None:
            return False
        if self.left == self.right:
            return not (self.left_closed and self.right_closed)
        return self.left > self.right

    def includes(self, version: VersionLike) -> bool:
        """Test whether ``version`` lies inside this range."""
        if self.empty:
            return False
        v = _as_version(version)
        if self.left_closed:
            if self.left > v:
                return False
        elif self.left >= v:
            return False
        if self.right is None:
            return True
        if self.right_closed:
            return self.right >= v
        return self.right > v

    def __contains__(self, version: VersionLike) -> bool:
        return self.includes(version)

    @cached_property
    def _text(self) -> str:
        if self.right is None:
            return str(self.left)
        return (
            f"{self.left_type}{self.left}{ENDPOINT_DELIMITER}"
            f"{self.right}{self.right_type}"
        )

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"VersionRange({self._text!r})"

    @cached_property
    def _hash(self) -> int:
        if self.empty:
            return hash(("VersionRange", "empty"))
        if self.right is None:
            return hash(("VersionRange", self.left))
        return hash(("VersionRange", self.left_closed, self.left, self.right, self.right_closed))

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, VersionRange):
            return NotImplemented
        if self.empty and other.empty:
            return True
        if self.right is None:
            return other.right is None and self.left == other.left
        return (
            self.left_closed == other.left_closed
            and self.right_closed == other.right_closed
            and self.left == other.left
            and self.right == other.right
        )


__all__ = [
    "Version",
    "VersionRange",
    "VersionLike",
    "compare_versions",
    "LEFT_OPEN",
    "LEFT_CLOSED",
    "RIGHT_OPEN",
    "RIGHT_CLOSED",
]
