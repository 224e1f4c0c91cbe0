"""Line-oriented ``.npmrc`` document model.

An npmrc file is a sequence of ``key = value`` properties and ``;`` comments.
The document keeps every entry in file order so that templating a stored
config only adds or rewrites the keys it touches:

    ; user config
    registry = https://registry.npmjs.org/
    @acme:registry = https://npm.acme.com/
    //npm.acme.com/:_auth = Ym90OnMzY3IzdA==

Parsing never fails. Blank lines are dropped, a line that is neither a
comment nor contains ``=`` is kept as a comment so no content is lost.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

COMMENT_PREFIX = ";"
KEY_VALUE_SEPARATOR = "="


@dataclass(frozen=True)
class Property:
    """A ``key = value`` line."""
    key: str
    value: str

    def render(self) -> str:
        return f"{self.key} = {self.value}"


@dataclass(frozen=True)
class Comment:
    """A ``;`` comment line, text stored without the prefix."""
    text: str

    def render(self) -> str:
        return f"{COMMENT_PREFIX}{self.text}"


Entry = Union[Property, Comment]


def _check_key(key: Optional[str]) -> str:
    if key is None:
        raise TypeError("npmrc key must not be None")
    return key


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


class ConfigDocument:
    """Ordered npmrc content with independent comment entries.

    Setting an existing key rewrites it in place; new keys and comments are
    appended at the end.
    """

    def __init__(self, entries: Optional[List[Entry]] = None):
        self._entries: List[Entry] = []
        self._index: Dict[str, int] = {}
        for entry in entries or []:
            if isinstance(entry, Comment):
                self.add_comment(entry.text)
            else:
                self.set(entry.key, entry.value)

    # Parsing

    @classmethod
    def loads(cls, content: Optional[str]) -> ConfigDocument:
        """Parse npmrc text into a new document."""
        document = cls()
        document.parse_into(content)
        return document

    @classmethod
    def load(cls, path: Path) -> ConfigDocument:
        """Read and parse an npmrc file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            IsADirectoryError: If the path is not a regular file
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"npmrc file not found: {path}")
        if not path.is_file():
            raise IsADirectoryError(f"npmrc path is not a file: {path}")
        return cls.loads(path.read_text(encoding="utf-8"))

    def parse_into(self, content: Optional[str]) -> None:
        """Parse ``content`` and merge its entries into this document."""
        if content is None:
            return

        for raw in content.splitlines():
            line = raw.strip()
            if not line:
                continue
            if line.startswith(COMMENT_PREFIX):
                self.add_comment(line[len(COMMENT_PREFIX):])
                continue
            key, sep, value = line.partition(KEY_VALUE_SEPARATOR)
            if sep:
                self.set(key.strip(), value.strip())
            else:
                # Not a property, keep the line rather than dropping it
                self.add_comment(line)

    # Serialization

    def dumps(self) -> str:
        """Render the document, one newline-terminated line per entry."""
        return "".join(entry.render() + "\n" for entry in self._entries)

    def __str__(self) -> str:
        return self.dumps()

    def save(self, path: Path) -> None:
        """Write the document to ``path`` as UTF-8."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.dumps(), encoding="utf-8")

    # Queries

    def contains(self, key: str) -> bool:
        return _check_key(key) in self._index

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._index

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value for ``key`` or ``default`` when absent."""
        position = self._index.get(_check_key(key))
        if position is None:
            return default
        return self._entries[position].value

    def get_as_bool(self, key: str) -> Optional[bool]:
        """Return ``key`` as a boolean; only ``true`` (any case) is truthy."""
        value = self.get(key)
        if value is None:
            return None
        return value.strip().lower() == "true"

    def get_as_int(self, key: str) -> Optional[int]:
        """Return ``key`` as an integer.

        Raises:
            ValueError: If the stored value is not an integer
        """
        value = self.get(key)
        if value is None:
            return None
        return int(value)

    def keys(self) -> List[str]:
        return [e.key for e in self._entries if isinstance(e, Property)]

    def items(self) -> List[Tuple[str, str]]:
        return [(e.key, e.value) for e in self._entries if isinstance(e, Property)]

    def comments(self) -> List[str]:
        return [e.text for e in self._entries if isinstance(e, Comment)]

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigDocument):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"ConfigDocument({self._entries!r})"

    # Mutation

    def set(self, key: str, value: Union[str, bool]) -> Optional[str]:
        """Set ``key`` to ``value``, returning the previous value if any.

        Booleans are stored as ``true``/``false``.
        """
        _check_key(key)
        if value is None:
            raise TypeError(f"npmrc value for {key!r} must not be None")
        text = _bool_text(value) if isinstance(value, bool) else str(value)

        position = self._index.get(key)
        if position is None:
            self._index[key] = len(self._entries)
            self._entries.append(Property(key, text))
            return None

        previous = self._entries[position].value
        self._entries[position] = Property(key, text)
        return previous

    def remove(self, key: str) -> Optional[str]:
        """Remove ``key``, returning its value, or ``None`` if absent."""
        position = self._index.pop(_check_key(key), None)
        if position is None:
            return None
        removed = self._entries.pop(position)
        for other, index in self._index.items():
            if index > position:
                self._index[other] = index - 1
        return removed.value

    def add_comment(self, text: str) -> None:
        """Append a comment; identical comments are kept as separate lines."""
        self._entries.append(Comment("" if text is None else text))


__all__ = [
    "ConfigDocument",
    "Property",
    "Comment",
    "Entry",
]
