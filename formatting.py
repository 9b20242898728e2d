"""Turn the values passed to a log call into the message cell."""

import json
import math
import re
from typing import Any, Mapping, Sequence, Union

# Anything a caller may hand to SheetLog.log() and friends.
LogValue = Union[str, int, float, bool, None, Mapping[str, Any], Sequence[Any]]

PLACEHOLDER_RE = re.compile(r"%[sdj]")
_TOKEN_RE = re.compile(r"%([sdj%])")


def has_placeholder(template: Any) -> bool:
    """True if *template* is a string containing %s, %d or %j."""
    return isinstance(template, str) and PLACEHOLDER_RE.search(template) is not None


def _dumps(value: Any, **kwargs) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, default=str, **kwargs)
    except (TypeError, ValueError):
        # non-string keys, circular references
        return str(value)


def to_display(value: LogValue) -> str:
    """Strings stay as-is; everything else becomes indented JSON.

    Whole floats print without the trailing ``.0``, like numbers in JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return _dumps(value, indent=2)


def _to_json(value: Any) -> str:
    return _dumps(value, separators=(",", ":"))


def _to_int(value: Any) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return "NaN"
    if isinstance(value, float) and math.isfinite(value):
        return str(int(value))
    return "NaN"


def format_string(template: str, *args: Any) -> str:
    """printf-style substitution of *args* into *template*.

    Placeholders without a matching argument are left untouched, surplus
    arguments are dropped.
    """
    remaining = list(args)

    def _substitute(match: re.Match) -> str:
        kind = match.group(1)
        if kind == "%":
            return "%"
        if not remaining:
            return match.group(0)
        value = remaining.pop(0)
        if kind == "s":
            return to_display(value)
        if kind == "d":
            return _to_int(value)
        return _to_json(value)

    return _TOKEN_RE.sub(_substitute, template)


def format_message(values: Sequence[LogValue]) -> str:
    """Build the message cell from the (already user-stripped) values."""
    if len(values) > 1 and has_placeholder(values[0]):
        return format_string(values[0], *values[1:])
    return "\n".join(to_display(v) for v in values)
