"""Property listing and editing commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..models import Note
from ..properties import collect_records, insert_property, replace_property
from ..properties.records import GroupedRecord, record_columns
from ..vault.loader import load_note, load_vault

logger = logging.getLogger(__name__)


def _find_note(vault_path: Path, name: str, err: Console) -> Note | None:
    """Resolve a note by path, file name or alias.

    Prints the reason to ``err`` and returns None when the note is missing
    or cannot be loaded.
    """
    candidate = Path(name)
    if not candidate.is_absolute():
        candidate = vault_path / candidate
    if candidate.suffix != ".md":
        candidate = candidate.with_name(candidate.name + ".md")
    if candidate.is_file():
        try:
            return load_note(candidate)
        except Exception as e:
            err.print(f"Failed to load {escape(str(candidate))}: {escape(str(e))}", style="bold red")
            return None

    note = load_vault(vault_path).get(Path(name).stem)
    if note is None:
        err.print(f"Note not found: {escape(name)}", style="bold red")
    return note


def _write_note(note: Note, new_text: str) -> None:
    # newline="" keeps \r\n line endings as they were read
    with note.path.open("w", encoding="utf-8", newline="") as f:
        f.write(new_text)
    logger.info("Updated %s", note.path)


def run_list(vault_path: Path, note_name: str, *, output_json: bool = False, show_hidden: bool = False) -> int:
    """Show the inline properties of one note."""
    err = Console(stderr=True)
    note = _find_note(vault_path, note_name, err)
    if note is None:
        return 1

    properties = note.properties if show_hidden else note.visible_properties()

    if output_json:
        data = {
            "note": note.name,
            "path": str(note.path),
            "properties": [p.to_dict() for p in properties],
        }
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0

    table = Table(title=f"Properties: {escape(note.title)}")
    table.add_column("line", style="dim", justify="right")
    table.add_column("key", style="cyan", no_wrap=True)
    table.add_column("type", style="magenta")
    table.add_column("value")
    table.add_column("group", style="dim")
    if show_hidden:
        table.add_column("hidden", style="dim")

    for p in properties:
        row = [
            str(p.line_number),
            p.key,
            p.value.kind,
            escape(p.value.display()),
            str(p.group_id) if p.group_id is not None else "",
        ]
        if show_hidden:
            row.append("yes" if p.hidden else "")
        table.add_row(*row)

    Console().print(table)
    return 0


def run_set(vault_path: Path, note_name: str, key: str, value: str, *, index: int = 1) -> int:
    """Replace the ``index``-th property named ``key`` with a new value."""
    err = Console(stderr=True)
    note = _find_note(vault_path, note_name, err)
    if note is None:
        return 1

    matches = note.get(key)
    if not matches:
        err.print(f"No property '{key}' in {note.name}", style="bold red")
        return 1
    if index < 1 or index > len(matches):
        err.print(f"'{key}' occurs {len(matches)} time(s) in {note.name}; --index {index} is out of range", style="bold red")
        return 1

    prop = matches[index - 1]
    if prop.group_id is not None:
        err.print(
            f"[yellow]⚠[/] '{key}' is part of record {prop.group_id}; the whole bracket will be rewritten",
            style="dim",
        )
    if prop.hidden:
        err.print(f"[yellow]⚠[/] '{key}' was hidden; it will be written back as visible", style="dim")

    _write_note(note, replace_property(note.text, prop, value))
    err.print(f"✓ {note.name}: {escape(f'[{key}::{value}]')}", style="green")
    return 0


def run_add(vault_path: Path, note_name: str, line: int, key: str, value: str) -> int:
    """Append ``[key::value]`` to a line of a note."""
    err = Console(stderr=True)
    note = _find_note(vault_path, note_name, err)
    if note is None:
        return 1

    new_text = insert_property(note.text, line, key, value)
    if new_text == note.text:
        err.print(f"Line {line} does not exist in {note.name}", style="bold red")
        return 1

    _write_note(note, new_text)
    err.print(f"✓ {note.name}:{line}: {escape(f'[{key}::{value}]')}", style="green")
    return 0


def run_records(vault_path: Path, note_name: str | None = None, *, output_json: bool = False) -> int:
    """Show grouped records for one note or for the whole vault."""
    err = Console(stderr=True)

    if note_name is not None:
        note = _find_note(vault_path, note_name, err)
        if note is None:
            return 1
        notes = [note]
    else:
        notes = load_vault(vault_path).notes

    records: list[GroupedRecord] = []
    for note in notes:
        records.extend(collect_records(note.properties, note_name=note.name))

    if output_json:
        print(json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False))
        return 0

    if not records:
        err.print("No grouped records found.", style="dim")
        return 0

    columns = record_columns(records)
    table = Table(title="Grouped records")
    table.add_column("note", style="cyan", no_wrap=True)
    table.add_column("line", style="dim", justify="right")
    for column in columns:
        table.add_column(column)
    for r in records:
        table.add_row(r.note_name or "", str(r.line_number), *(escape(r.properties.get(c, "")) for c in columns))

    Console().print(table)
    return 0
