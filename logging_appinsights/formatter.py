"""Turn an entry's fields into the string properties of a trace."""

import datetime
import json
import numbers
from typing import Any, Callable, Iterable, Mapping, Optional

from logging_appinsights.models import Entry

MESSAGE_KEY = "message"

FieldFilter = Callable[[Any], Any]


def is_structured(value: Any) -> bool:
    """True when *value* can render itself in a structured (JSON-like) form."""
    if callable(getattr(value, "to_json", None)):
        return True
    return isinstance(value, (dict, list, tuple, datetime.date, datetime.time))


def _has_text_repr(value: Any) -> bool:
    if isinstance(value, (str, numbers.Number)):
        return False
    return type(value).__str__ is not object.__str__


def format_value(value: Any) -> Any:
    """Default normalization for a field value without a filter.

    Checked in order, first match wins:
        1. structured values are returned unchanged (to_text renders them)
        2. exceptions become their message
        3. types with their own __str__ become that string
        4. anything else is returned unchanged
    """
    if is_structured(value):
        return value
    if isinstance(value, BaseException):
        return str(value)
    if _has_text_repr(value):
        return str(value)
    return value


def to_text(value: Any) -> str:
    """Render a candidate value as the string stored in the trace."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        rendered = to_json()
        if isinstance(rendered, str):
            return rendered
        return json.dumps(rendered, default=str, ensure_ascii=False)
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str, ensure_ascii=False)
    return str(value)


def normalize(
    entry: Entry,
    ignore: Iterable[str] = (),
    filters: Optional[Mapping[str, FieldFilter]] = None,
) -> dict[str, str]:
    """Build the string properties for *entry*.

    Adds the entry message under "message" when the fields lack one. Ignored
    fields are dropped, filtered fields take the filter's result as-is, and
    everything else goes through format_value.
    """
    if MESSAGE_KEY not in entry.data:
        entry.data[MESSAGE_KEY] = entry.message

    ignore = frozenset(ignore)
    filters = filters or {}
    properties: dict[str, str] = {}
    for name, value in list(entry.data.items()):
        if name in ignore:
            continue
        fn = filters.get(name)
        if fn is not None:
            value = fn(value)
        else:
            value = format_value(value)
        properties[name] = to_text(value)
    return properties
