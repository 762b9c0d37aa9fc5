"""Grouped records: one row per multi-property bracket span."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .inline import InlineProperty


@dataclass
class GroupedRecord:
    """Properties that were written together as ``[a::1, b::2]``."""

    note_name: str | None
    group_id: int
    line_number: int
    properties: dict[str, str] = field(default_factory=dict)  # key -> raw value

    def to_dict(self) -> dict[str, Any]:
        return {
            "note": self.note_name,
            "group_id": self.group_id,
            "line": self.line_number,
            "properties": dict(self.properties),
        }


def collect_records(properties: Iterable[InlineProperty], note_name: str | None = None) -> list[GroupedRecord]:
    """Fold grouped properties into records, ordered by group id.

    Standalone properties are skipped. A key repeated within one group keeps
    its last value.
    """
    by_group: dict[int, GroupedRecord] = {}
    for prop in properties:
        if prop.group_id is None:
            continue
        record = by_group.get(prop.group_id)
        if record is None:
            record = GroupedRecord(note_name=note_name, group_id=prop.group_id, line_number=prop.line_number)
            by_group[prop.group_id] = record
        record.properties[prop.key] = prop.raw_value
    return [by_group[gid] for gid in sorted(by_group)]


def record_columns(records: Iterable[GroupedRecord]) -> list[str]:
    """Union of record keys in first-seen order (table columns)."""
    columns: list[str] = []
    for record in records:
        for key in record.properties:
            if key not in columns:
                columns.append(key)
    return columns
