"""Inline property extraction for ``[key::value]`` notation.

Supported forms:

- ``[titulo::Mi Libro]``                     one visible property
- ``[campo:::valor]``                        one hidden property
- ``[autor::Cervantes, libro::Quijote]``     grouped record sharing a group id
- ``[titulo::Cien años\\, novela]``           escaped comma inside a value

A bracket span always ends at the first ``]``; brackets do not nest.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass, field, replace
from typing import Any, Iterator

from .values import ESCAPED_COMMA, PropertyValue, infer_value, restore_commas


@dataclass(frozen=True)
class PropertyPatterns:
    """Compiled expressions used by the scanner and the tokenizer."""

    # [ ... ] with no "]" inside; the first "]" closes the span
    bracket: re.Pattern = field(default_factory=lambda: re.compile(r"\[([^\]]+)\]"))
    # key (letter first, then letters/digits/_), then :: or ::: with optional spaces
    pair: re.Pattern = field(default_factory=lambda: re.compile(r"([^\W\d_]\w*)\s*(:::?)\s*"))

    def iter_pairs(self, text: str) -> Iterator[re.Match]:
        """Yield ``key::`` matches whose key starts with a letter.

        ``[^\\W\\d_]`` also admits numerals such as ``½`` or ``Ⅻ``; those starts
        are skipped and the search resumes one character later.
        """
        pos = 0
        while True:
            match = self.pair.search(text, pos)
            if match is None:
                return
            if not match.group(1)[0].isalpha():
                pos = match.start() + 1
                continue
            yield match
            pos = match.end()


DEFAULT_PATTERNS = PropertyPatterns()


@dataclass(frozen=True)
class InlineProperty:
    """A property extracted from note text."""

    key: str
    value: PropertyValue
    raw_value: str  # value as written, escaped commas restored
    line_number: int  # 1-indexed line where the bracket starts
    char_start: int  # offset of "[" in the content
    char_end: int  # offset just past "]"
    linked_note: str | None = None
    group_id: int | None = None
    hidden: bool = False  # written with ":::"

    def full_text(self) -> str:
        """Render this property as a standalone bracket span."""
        separator = ":::" if self.hidden else "::"
        return f"[{self.key}{separator}{self.raw_value}]"

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "value": self.value.to_json(),
            "raw_value": self.raw_value,
            "line": self.line_number,
            "char_start": self.char_start,
            "char_end": self.char_end,
            "linked_note": self.linked_note,
            "group_id": self.group_id,
            "hidden": self.hidden,
        }


@dataclass(frozen=True)
class BracketSpan:
    """One ``[...]`` occurrence in a document."""

    inner: str
    line_number: int
    char_start: int
    char_end: int


def line_offsets(content: str) -> list[int]:
    """Start offset of every line: 0 plus one past each newline."""
    offsets = [0]
    offsets.extend(i + 1 for i, ch in enumerate(content) if ch == "\n")
    return offsets


def scan_brackets(content: str, patterns: PropertyPatterns = DEFAULT_PATTERNS) -> Iterator[BracketSpan]:
    """Yield bracket spans in document order."""
    offsets = line_offsets(content)
    for match in patterns.bracket.finditer(content):
        start, end = match.span()
        # number of line starts at or before the span = 1-indexed line
        line_number = bisect.bisect_right(offsets, start)
        yield BracketSpan(
            inner=match.group(1),
            line_number=line_number,
            char_start=start,
            char_end=end,
        )


def tokenize_span(span: BracketSpan, patterns: PropertyPatterns = DEFAULT_PATTERNS) -> list[InlineProperty]:
    """Split the inside of one bracket span into properties.

    With a single ``key::`` the rest of the span is its value. With several,
    each value runs up to the last comma before the next key; whatever sits
    between that comma and the next key belongs to neither value.
    """
    escaped = span.inner.replace("\\,", ESCAPED_COMMA)
    pairs = list(patterns.iter_pairs(escaped))
    if not pairs:
        return []

    properties = []
    for i, pair in enumerate(pairs):
        value_start = pair.end()
        if i + 1 < len(pairs):
            next_start = pairs[i + 1].start()
            comma = escaped.rfind(",", value_start, next_start)
            value_end = comma if comma != -1 else next_start
        else:
            value_end = len(escaped)

        raw = escaped[value_start:value_end].strip()
        value, linked_note = infer_value(raw)
        properties.append(
            InlineProperty(
                key=pair.group(1),
                value=value,
                raw_value=restore_commas(raw),
                line_number=span.line_number,
                char_start=span.char_start,
                char_end=span.char_end,
                linked_note=linked_note,
                hidden=pair.group(2) == ":::",
            )
        )
    return properties


def assign_group(properties: list[InlineProperty], last_group_id: int) -> tuple[list[InlineProperty], int]:
    """Give a multi-property span the next group id.

    Returns the (possibly re-stamped) properties and the updated counter.
    Spans with a single property keep ``group_id=None`` and leave the
    counter untouched.
    """
    if len(properties) < 2:
        return properties, last_group_id
    group_id = last_group_id + 1
    return [replace(p, group_id=group_id) for p in properties], group_id


def parse(content: str, patterns: PropertyPatterns = DEFAULT_PATTERNS) -> list[InlineProperty]:
    """Extract every inline property from ``content`` in document order.

    Never raises: bracket spans without a ``key::`` pair are ordinary text.
    """
    properties: list[InlineProperty] = []
    group_id = 0
    for span in scan_brackets(content, patterns):
        found, group_id = assign_group(tokenize_span(span, patterns), group_id)
        properties.extend(found)
    return properties


def replace_property(content: str, prop: InlineProperty, new_value: str) -> str:
    """Replace the whole bracket span of ``prop`` with ``[key::new_value]``.

    The visible ``::`` separator is always written, even for a hidden property.
    """
    return f"{content[:prop.char_start]}[{prop.key}::{new_value}]{content[prop.char_end:]}"


def insert_property(content: str, line: int, key: str, value: str) -> str:
    """Append `` [key::value]`` to the end of 1-indexed ``line``.

    Line terminators (including ``\\r\\n``) are kept as they are. A line
    number outside the document returns ``content`` unchanged.
    """
    segments = content.split("\n")
    line_count = len(segments) - 1 if segments[-1] == "" else len(segments)
    if line < 1 or line > line_count:
        return content

    target = segments[line - 1]
    ending = ""
    if target.endswith("\r"):
        target, ending = target[:-1], "\r"
    segments[line - 1] = f"{target} [{key}::{value}]{ending}"
    return "\n".join(segments)
