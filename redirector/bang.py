"""Bang command records as published in bang lists."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Category(Enum):
    """Category a bang command belongs to."""

    ENTERTAINMENT = "Entertainment"
    MULTIMEDIA = "Multimedia"
    NEWS = "News"
    ONLINE_SERVICES = "Online Services"
    RESEARCH = "Research"
    SHOPPING = "Shopping"
    TECH = "Tech"
    TRANSLATION = "Translation"


# Long field name -> short key used in the serialized form.
_KEYS: dict[str, str] = {
    "category": "c",
    "domain": "d",
    "relevance": "r",
    "short_name": "s",
    "subcategory": "sc",
    "trigger": "t",
    "url_template": "u",
}


@dataclass(frozen=True)
class Bang:
    """A single bang command: a trigger and the URL template it expands to."""

    trigger: str
    url_template: str
    category: Category | None = None
    domain: str | None = None
    relevance: int | None = None
    short_name: str | None = None
    subcategory: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the bang in its short-key serialized form."""
        return {
            "c": self.category.value if self.category is not None else None,
            "d": self.domain,
            "r": self.relevance,
            "s": self.short_name,
            "sc": self.subcategory,
            "t": self.trigger,
            "u": self.url_template,
        }


def _optional_str(name: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"field {name!r} must be a string")


def _required_str(name: str, value: Any) -> str:
    if value is None:
        raise ValueError(f"missing field {_KEYS[name]!r}")
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} must be a string")
    return value


def _category(value: Any) -> Category | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("field 'category' must be a string")
    try:
        return Category(value)
    except ValueError:
        raise ValueError(f"unknown category {value!r}") from None


def _relevance(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError("field 'relevance' must be a non-negative integer")
    return value


def parse_bang(data: Mapping[str, Any]) -> Bang:
    """Build a bang from a mapping using either short keys or long field names."""
    if not isinstance(data, Mapping):
        raise ValueError("bang entry must be an object")
    values: dict[str, Any] = {}
    for name, short in _KEYS.items():
        present = [key for key in (short, name) if key in data]
        if len(present) > 1:
            raise ValueError(f"duplicate field {short!r}")
        values[name] = data[present[0]] if present else None
    return Bang(
        trigger=_required_str("trigger", values["trigger"]),
        url_template=_required_str("url_template", values["url_template"]),
        category=_category(values["category"]),
        domain=_optional_str("domain", values["domain"]),
        relevance=_relevance(values["relevance"]),
        short_name=_optional_str("short_name", values["short_name"]),
        subcategory=_optional_str("subcategory", values["subcategory"]),
    )


def load_bangs(text: str) -> list[Bang]:
    """Parse a JSON array of bang entries."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("bang list must be a JSON array")
    return [parse_bang(entry) for entry in data]