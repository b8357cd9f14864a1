"""Log record data model.

A :class:`Record` is built once per logging call and never mutated. Its
attributes are plain :class:`Attr` pairs; a :class:`Group` value nests
attributes under a key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Iterable, Mapping, Optional, Tuple


TIME_KEY = "time"
LEVEL_KEY = "level"
MESSAGE_KEY = "msg"
SOURCE_KEY = "source"


class Level(IntEnum):
    """Record severity. Gaps between values leave room for custom levels."""

    DEBUG = -4
    INFO = 0
    WARN = 4
    ERROR = 8

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: Any) -> "Level":
        """Resolve a level from a Level, an int, or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        name = _LEVEL_ALIASES.get(name, name)
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None


_LEVEL_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "ERROR",
    "FATAL": "ERROR",
}


@dataclass(frozen=True)
class Attr:
    """A single key/value attribute."""

    key: str
    value: Any


class Group(tuple):
    """Attr value holding nested attrs."""

    def __repr__(self) -> str:
        return f"Group({tuple.__repr__(self)})"


def group(key: str, *attrs: Attr, **kwargs: Any) -> Attr:
    """Build a group attr from positional attrs and keyword pairs."""
    return Attr(key, Group(to_attrs(attrs, kwargs)))


def to_attrs(attrs: Iterable[Any], kwargs: Optional[Mapping[str, Any]] = None) -> Tuple[Attr, ...]:
    """Normalize positional ``Attr`` objects and keyword pairs into a tuple."""
    result = []
    for attr in attrs:
        if not isinstance(attr, Attr):
            raise TypeError(f"Positional log arguments must be Attr, got {type(attr).__name__}")
        result.append(attr)
    if kwargs:
        result.extend(Attr(key, value) for key, value in kwargs.items())
    return tuple(result)


@dataclass(frozen=True)
class Source:
    """Call site of a logging statement."""

    function: str
    file: str
    line: int


@dataclass(frozen=True)
class Record:
    """One log event as emitted by a call site."""

    time: datetime
    level: Level
    message: str
    attrs: Tuple[Attr, ...] = field(default_factory=tuple)
    source: Optional[Source] = None
