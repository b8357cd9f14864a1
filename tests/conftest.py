"""
Shared fixtures for prettylog tests.

Rendered lines look like ``[2024-05-01 12:00:00.123] INFO: message {...}``;
``parse_line`` splits one back into its fields with the attrs decoded.
"""
import json
import re
from dataclasses import dataclass
from typing import Any, Dict

import pytest

from prettylog.core import logger as logger_module

LINE_PATTERN = re.compile(
    r"^\[(?P<timestamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3})\] "
    r"(?P<level>[A-Z]+): (?P<message>.*?) (?P<attrs>\{.*\})$",
    re.DOTALL,
)


@dataclass
class ParsedLine:
    timestamp: str
    level: str
    message: str
    attrs: Dict[str, Any]


def _parse_line(line: str) -> ParsedLine:
    match = LINE_PATTERN.match(line)
    assert match is not None, f"unexpected log line: {line!r}"
    return ParsedLine(
        timestamp=match["timestamp"],
        level=match["level"],
        message=match["message"],
        attrs=json.loads(match["attrs"]),
    )


@pytest.fixture
def parse_line():
    return _parse_line


@pytest.fixture
def read_lines(capsys):
    """Return a callable parsing every compact line written to stdout so far."""

    def _read():
        out = capsys.readouterr().out
        return [_parse_line(line) for line in out.splitlines() if line]

    return _read


@pytest.fixture(autouse=True)
def _reset_default_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logger_module, "_default_logger", None)
