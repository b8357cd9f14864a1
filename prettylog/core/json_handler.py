"""JSON handler that writes one object per record to a text stream.

This is the structured encoder the pretty handler wraps. Serialization and
output are delegated to structlog: ``JSONRenderer`` turns the event dict into
a JSON string and ``PrintLogger`` writes it newline-terminated.

Attribute semantics:

- ``with_attrs`` resolves attrs immediately into the currently open group.
- ``with_group`` opens a group; later attrs (bound or per-record) nest in it.
- A group that ends up with no attrs is left out of the output.
- ``replace_attr(groups, attr)`` sees every non-group attr, built-ins
  included (with an empty group path); returning ``None`` drops the attr.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, TextIO, Tuple

import structlog

from .record import (
    LEVEL_KEY,
    MESSAGE_KEY,
    SOURCE_KEY,
    TIME_KEY,
    Attr,
    Group,
    Level,
    Record,
)

ReplaceAttr = Callable[[Sequence[str], Attr], Optional[Attr]]


@dataclass
class JSONHandlerOptions:
    """Options shared by every handler in a lineage."""

    level: Level = Level.INFO
    add_source: bool = False
    replace_attr: Optional[ReplaceAttr] = None


def _json_default(obj: Any) -> Any:
    # Durations are integer nanoseconds.
    if isinstance(obj, timedelta):
        return (obj.days * 86400 + obj.seconds) * 1_000_000_000 + obj.microseconds * 1000
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, BaseException):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if hasattr(obj, "__structlog__"):
        return obj.__structlog__()
    return repr(obj)


def _merge_at(tree: Dict[str, Any], groups: Tuple[str, ...], values: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of *tree* with *values* merged under the *groups* path.

    Only the dicts along the path are copied, so *tree* is never mutated.
    """
    root = dict(tree)
    node = root
    for name in groups:
        child = node.get(name)
        child = dict(child) if isinstance(child, dict) else {}
        node[name] = child
        node = child
    node.update(values)
    return root


class JSONHandler:
    """Structured JSON handler writing to *stream*."""

    def __init__(self, stream: TextIO, opts: Optional[JSONHandlerOptions] = None) -> None:
        self._opts = opts or JSONHandlerOptions()
        self._output = structlog.PrintLogger(file=stream)
        self._render = structlog.processors.JSONRenderer(default=_json_default)
        self._bound: Dict[str, Any] = {}
        self._groups: Tuple[str, ...] = ()

    def enabled(self, level: Level) -> bool:
        return level >= self._opts.level

    def with_attrs(self, attrs: Iterable[Attr]) -> "JSONHandler":
        attrs = tuple(attrs)
        if not attrs:
            return self
        clone = copy.copy(self)
        clone._bound = _merge_at(self._bound, self._groups, self._resolve(attrs, self._groups))
        return clone

    def with_group(self, name: str) -> "JSONHandler":
        if not name:
            return self
        clone = copy.copy(self)
        clone._groups = self._groups + (name,)
        return clone

    def handle(self, record: Record) -> None:
        builtins = [
            Attr(TIME_KEY, record.time),
            Attr(LEVEL_KEY, str(record.level)),
            Attr(MESSAGE_KEY, record.message),
        ]
        if self._opts.add_source and record.source is not None:
            builtins.append(Attr(SOURCE_KEY, {
                "function": record.source.function,
                "file": record.source.file,
                "line": record.source.line,
            }))

        event: Dict[str, Any] = {}
        for attr in builtins:
            self._add(event, (), attr)

        resolved = self._resolve(record.attrs, self._groups)
        if resolved:
            event.update(_merge_at(self._bound, self._groups, resolved))
        else:
            event.update(self._bound)

        self._output.msg(self._render(self._output, str(record.level).lower(), event))

    def _resolve(self, attrs: Iterable[Attr], groups: Tuple[str, ...]) -> Dict[str, Any]:
        resolved: Dict[str, Any] = {}
        for attr in attrs:
            self._add(resolved, groups, attr)
        return resolved

    def _add(self, target: Dict[str, Any], groups: Tuple[str, ...], attr: Attr) -> None:
        if isinstance(attr.value, Group):
            if not attr.value:
                return
            if not attr.key:
                # Inline the members of an unnamed group.
                for member in attr.value:
                    self._add(target, groups, member)
                return
            nested: Dict[str, Any] = {}
            for member in attr.value:
                self._add(nested, groups + (attr.key,), member)
            if nested:
                target[attr.key] = nested
            return

        replace_attr = self._opts.replace_attr
        if replace_attr is not None:
            attr = replace_attr(groups, attr)
            if attr is None:
                return
        target[attr.key] = attr.value
