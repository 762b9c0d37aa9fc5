"""Vault loading and note lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import frontmatter

from ..models import Note
from ..properties import parse

logger = logging.getLogger(__name__)


@dataclass
class Vault:
    """Container for all loaded notes."""

    path: Path
    notes: list[Note] = field(default_factory=list)

    # Lookup tables built after loading
    _by_name: dict[str, Note] = field(default_factory=dict)
    _aliases: dict[str, str] = field(default_factory=dict)  # alias -> canonical name

    def __post_init__(self):
        self._build_lookups()

    def _build_lookups(self):
        """Build name lookup and alias mapping."""
        self._by_name.clear()
        self._aliases.clear()
        for note in self.notes:
            self._by_name[note.name.lower()] = note
        for note in self.notes:
            canonical = note.name.lower()
            for alias in note.aliases:
                self._aliases.setdefault(alias.lower(), canonical)

    def get(self, name: str) -> Note | None:
        """Get note by name or alias."""
        normalized = name.strip().lower()
        if normalized in self._by_name:
            return self._by_name[normalized]
        return self._by_name.get(self._aliases.get(normalized, normalized))

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None


def load_note(path: Path) -> Note:
    """Read a markdown file and extract its frontmatter and inline properties."""
    # Bytes, so \r\n survives and offsets match the file on disk
    text = path.read_bytes().decode("utf-8")
    post = frontmatter.loads(text)

    return Note(
        path=path,
        name=path.stem,
        text=text,
        content=post.content,
        frontmatter=dict(post.metadata),
        # Offsets address the file as stored so edits can be written back.
        properties=parse(text),
    )


def load_vault(vault_path: Path) -> Vault:
    """Load all markdown files from the vault.

    Args:
        vault_path: Path to the vault directory

    Returns:
        Vault with every readable note
    """
    vault = Vault(path=vault_path)

    for md_file in sorted(vault_path.rglob("*.md")):
        # Skip hidden files and directories
        rel_parts = md_file.relative_to(vault_path).parts
        if any(part.startswith(".") for part in rel_parts):
            continue

        try:
            vault.notes.append(load_note(md_file))
        except Exception as e:
            # Log error but continue loading
            logger.warning("Failed to load %s: %s", md_file, e)

    vault._build_lookups()
    logger.debug("Loaded %d notes from %s", len(vault.notes), vault_path)

    return vault
