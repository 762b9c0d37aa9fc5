"""Typed property values and the value type cascade.

A raw value taken from ``[key::value]`` is classified into exactly one
variant. Rules are tried in order and the first match wins:

1. ``@Name``               -> Link
2. ``true`` / ``false``    -> Checkbox (case-insensitive)
3. float (no literal ``,``) -> Number
4. ``YYYY-MM-DD``          -> Date
5. ``YYYY-MM-DDT...``      -> DateTime
6. comma separated         -> Tags / Links / List
7. ``#a #b``               -> Tags
8. anything else           -> Text
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, ClassVar

# Stand-in for an escaped comma (``\,``) while values are being split.
ESCAPED_COMMA = "\x00ESCAPED_COMMA\x00"


def restore_commas(text: str) -> str:
    """Turn escaped-comma markers back into literal commas."""
    return text.replace(ESCAPED_COMMA, ",")


@dataclass(frozen=True)
class PropertyValue:
    """Base class for all value variants."""

    kind: ClassVar[str] = ""

    @property
    def payload(self) -> Any:
        raise NotImplementedError

    def display(self) -> str:
        return str(self.payload)

    def to_json(self) -> dict[str, Any]:
        payload = self.payload
        if isinstance(payload, tuple):
            payload = list(payload)
        return {"type": self.kind, "value": payload}


@dataclass(frozen=True)
class Text(PropertyValue):
    kind: ClassVar[str] = "text"
    value: str

    @property
    def payload(self) -> str:
        return self.value


@dataclass(frozen=True)
class Number(PropertyValue):
    kind: ClassVar[str] = "number"
    value: float

    @property
    def payload(self) -> float:
        return self.value

    def display(self) -> str:
        if self.value.is_integer():
            return str(int(self.value))
        return repr(self.value)

    def to_json(self) -> dict[str, Any]:
        # JSON has no literal for inf or nan
        if not math.isfinite(self.value):
            return {"type": self.kind, "value": str(self.value)}
        return super().to_json()


@dataclass(frozen=True)
class Checkbox(PropertyValue):
    kind: ClassVar[str] = "checkbox"
    value: bool

    @property
    def payload(self) -> bool:
        return self.value

    def display(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Date(PropertyValue):
    """Calendar date as written (``YYYY-MM-DD``), never range-checked."""

    kind: ClassVar[str] = "date"
    value: str

    @property
    def payload(self) -> str:
        return self.value


@dataclass(frozen=True)
class DateTime(PropertyValue):
    kind: ClassVar[str] = "datetime"
    value: str

    @property
    def payload(self) -> str:
        return self.value


@dataclass(frozen=True)
class Link(PropertyValue):
    """Relation to a single note."""

    kind: ClassVar[str] = "link"
    note: str

    @property
    def payload(self) -> str:
        return self.note

    def display(self) -> str:
        return f"@{self.note}"


@dataclass(frozen=True)
class Links(PropertyValue):
    kind: ClassVar[str] = "links"
    notes: tuple[str, ...]

    @property
    def payload(self) -> tuple[str, ...]:
        return self.notes

    def display(self) -> str:
        return ", ".join(f"@{n}" for n in self.notes)


@dataclass(frozen=True)
class List(PropertyValue):
    kind: ClassVar[str] = "list"
    items: tuple[str, ...]

    @property
    def payload(self) -> tuple[str, ...]:
        return self.items

    def display(self) -> str:
        return ", ".join(self.items)


@dataclass(frozen=True)
class Tags(PropertyValue):
    """Tag set, stored without the leading ``#``."""

    kind: ClassVar[str] = "tags"
    tags: tuple[str, ...]

    @property
    def payload(self) -> tuple[str, ...]:
        return self.tags

    def display(self) -> str:
        return ", ".join(f"#{t}" for t in self.tags)


def is_date(text: str) -> bool:
    """Check for ``YYYY-MM-DD`` made of ASCII digits (no calendar validation)."""
    if len(text) != 10:
        return False
    parts = text.split("-")
    if len(parts) != 3:
        return False
    if [len(p) for p in parts] != [4, 2, 2]:
        return False
    return all(c in "0123456789" for p in parts for c in p)


def is_datetime(text: str) -> bool:
    """Check for a date prefix followed by a time part (``YYYY-MM-DDTHH:MM:SS...``)."""
    return "T" in text and len(text) >= 19 and is_date(text[:10])


def _parse_float(text: str) -> float | None:
    # float() also takes "1_000" and non-ASCII digits; plain numerals only.
    if not text or not text.isascii() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def infer_value(raw: str) -> tuple[PropertyValue, str | None]:
    """Classify a raw value string.

    ``raw`` may still contain escaped-comma markers; they never count as list
    separators and are restored to ``,`` in the produced value.

    Returns:
        ``(value, linked_note)`` where ``linked_note`` is set only for a
        single ``@Name`` relation.
    """
    trimmed = raw.strip()

    if trimmed.startswith("@"):
        note = restore_commas(trimmed[1:])
        return Link(note), note

    lowered = trimmed.lower()
    if lowered == "true":
        return Checkbox(True), None
    if lowered == "false":
        return Checkbox(False), None

    # "1,234" is a list, not a number
    if "," not in trimmed:
        number = _parse_float(restore_commas(trimmed))
        if number is not None:
            return Number(number), None

    if is_date(trimmed):
        return Date(trimmed), None

    if is_datetime(trimmed):
        return DateTime(trimmed), None

    if "," in trimmed:
        items = [restore_commas(s.strip()) for s in trimmed.split(",")]
        items = [s for s in items if s]
        if items:
            if all(s.startswith("#") for s in items):
                return Tags(tuple(s.lstrip("#") for s in items)), None
            if all(s.startswith("@") for s in items):
                return Links(tuple(s.lstrip("@") for s in items)), None
            return List(tuple(items)), None

    words = trimmed.split()
    if trimmed.startswith("#") and all(w.startswith("#") for w in words):
        return Tags(tuple(restore_commas(w.lstrip("#")) for w in words)), None

    return Text(restore_commas(trimmed)), None
