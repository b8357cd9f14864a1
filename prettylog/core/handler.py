"""
Human-readable handler decorating the JSON handler.

``PrettyHandler`` lets the wrapped JSON handler do all attribute work
(bound attrs, groups, ``replace_attr``), captures its output in a buffer,
decodes it back to a dict and renders one line per record::

    [2024-05-01 12:00:00.123] INFO: Application started {"port":8080}

Every handler derived from one ``new_handler`` root shares a single buffer
and lock, so the flatten phase of concurrent calls is serialized.
"""

from __future__ import annotations

import io
import json
import sys
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Protocol, Sequence

from .colors import (
    CYAN,
    DARK_GRAY,
    LIGHT_GRAY,
    LIGHT_RED,
    LIGHT_YELLOW,
    WHITE,
    colorize,
)
from .exceptions import DecodingError, EncodingError, MarshalError
from .json_handler import JSONHandler, JSONHandlerOptions, ReplaceAttr
from .record import LEVEL_KEY, MESSAGE_KEY, TIME_KEY, Attr, Level, Record


TIME_FORMAT = "[%Y-%m-%d %H:%M:%S.{millis}]"

LEVEL_COLORS = {
    Level.DEBUG: DARK_GRAY,
    Level.INFO: CYAN,
    Level.WARN: LIGHT_YELLOW,
    Level.ERROR: LIGHT_RED,
}

UNKNOWN_FILE = "unknown"


class Handler(Protocol):
    """Capabilities every record handler provides."""

    def enabled(self, level: Level) -> bool: ...

    def handle(self, record: Record) -> None: ...

    def with_attrs(self, attrs: Iterable[Attr]) -> "Handler": ...

    def with_group(self, name: str) -> "Handler": ...


@dataclass
class HandlerOptions(JSONHandlerOptions):
    """JSON handler options plus rendering flags."""

    colorize: bool = False
    pretty_print: bool = False


def suppress_defaults(next_replace: Optional[ReplaceAttr] = None) -> ReplaceAttr:
    """
    Wrap a ``replace_attr`` hook so time, level and message keys are dropped.

    Those fields are rendered outside the attribute blob. Other attrs go to
    *next_replace* when given, otherwise they pass through unchanged.
    """

    def replace(groups: Sequence[str], attr: Attr) -> Optional[Attr]:
        if attr.key in (TIME_KEY, LEVEL_KEY, MESSAGE_KEY):
            return None
        if next_replace is None:
            return attr
        return next_replace(groups, attr)

    return replace


def format_time(record: Record) -> str:
    millis = f"{record.time.microsecond // 1000:03d}"
    return record.time.strftime(TIME_FORMAT.format(millis=millis))


class PrettyHandler:
    """Handler rendering records as colored text plus a JSON attribute blob."""

    def __init__(
        self,
        inner: Handler,
        buffer: io.StringIO,
        lock: threading.Lock,
        colorize: bool = False,
        pretty_print: bool = False,
    ):
        """
        Args:
            inner: Handler that writes one JSON object per record to *buffer*
            buffer: Buffer shared by the whole handler lineage
            lock: Lock guarding *buffer*
            colorize: Wrap each rendered field in an ANSI color
            pretty_print: Indent the attribute JSON instead of compacting it
        """
        self._inner = inner
        self._buffer = buffer
        self._lock = lock
        self.colorize = colorize
        self.pretty_print = pretty_print

    def enabled(self, level: Level) -> bool:
        return self._inner.enabled(level)

    def with_attrs(self, attrs: Iterable[Attr]) -> "PrettyHandler":
        return self._derive(self._inner.with_attrs(attrs))

    def with_group(self, name: str) -> "PrettyHandler":
        return self._derive(self._inner.with_group(name))

    def _derive(self, inner: Handler) -> "PrettyHandler":
        return PrettyHandler(
            inner,
            self._buffer,
            self._lock,
            colorize=self.colorize,
            pretty_print=self.pretty_print,
        )

    def handle(self, record: Record) -> None:
        level = f"{record.level}:"

        attrs = self._compute_attrs(record)

        if record.level == Level.ERROR:
            if record.source is not None:
                attrs["file"] = record.source.file
                attrs["line"] = record.source.line
            else:
                attrs["file"] = UNKNOWN_FILE
                attrs["line"] = 0

        try:
            if self.pretty_print:
                attrs_json = json.dumps(attrs, indent=2, sort_keys=True, ensure_ascii=False, allow_nan=False)
            else:
                attrs_json = json.dumps(
                    attrs, separators=(",", ":"), sort_keys=True, ensure_ascii=False, allow_nan=False
                )
        except (TypeError, ValueError) as exc:
            raise MarshalError(f"error when marshaling attrs: {exc}") from exc

        timestamp = format_time(record)
        message = record.message
        if self.colorize:
            color = LEVEL_COLORS.get(record.level)
            if color is not None:
                level = colorize(color, level)
            timestamp = colorize(LIGHT_GRAY, timestamp)
            message = colorize(WHITE, message)
            attrs_json = colorize(DARK_GRAY, attrs_json)

        # One write per line; the stream is looked up per call.
        sys.stdout.write(f"{timestamp} {level} {message} {attrs_json}\n")

    def _compute_attrs(self, record: Record) -> Dict[str, Any]:
        """Run *record* through the inner handler and decode what it wrote."""
        with self._lock:
            try:
                try:
                    self._inner.handle(record)
                except Exception as exc:
                    raise EncodingError(f"error when calling inner handler's handle: {exc}") from exc

                try:
                    attrs = json.loads(self._buffer.getvalue())
                except ValueError as exc:
                    raise DecodingError(f"error when unmarshaling inner handler's handle result: {exc}") from exc
                if not isinstance(attrs, dict):
                    raise DecodingError(
                        f"inner handler wrote a JSON {type(attrs).__name__}, expected an object"
                    )
                return attrs
            finally:
                self._buffer.seek(0)
                self._buffer.truncate(0)


def new_handler(opts: Optional[HandlerOptions] = None) -> PrettyHandler:
    """Create the root handler of a new lineage with its own buffer and lock."""
    if opts is None:
        opts = HandlerOptions()
    buffer = io.StringIO()

    inner = JSONHandler(
        buffer,
        JSONHandlerOptions(
            level=opts.level,
            add_source=opts.add_source,
            replace_attr=suppress_defaults(opts.replace_attr),
        ),
    )
    return PrettyHandler(
        inner,
        buffer,
        threading.Lock(),
        colorize=opts.colorize,
        pretty_print=opts.pretty_print,
    )
