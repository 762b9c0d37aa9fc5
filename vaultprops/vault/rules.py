"""Lint rules for inline properties."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from ..properties import Link, Links

if TYPE_CHECKING:
    from .loader import Vault


@dataclass
class LintResult:
    """A single lint finding."""

    level: Literal["error", "warning", "info"]
    rule: str
    file: Path
    message: str
    line: int | None = None

    def __str__(self) -> str:
        loc = f"{self.file.name}"
        if self.line:
            loc += f":{self.line}"
        return f"{self.level.upper()}: [{self.rule}] {loc} - {self.message}"

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "rule": self.rule,
            "file": str(self.file),
            "message": self.message,
            "line": self.line,
        }


RULE_EXPLANATIONS = {
    "broken-relation": "A relation value (@Name) points to a note that does not exist in the vault.",
    "empty-value": "A property was written with nothing after its separator, e.g. [estado::].",
    "hidden-in-group": "A grouped record mixes hidden (:::) and visible (::) pairs.",
}


class PropertyRules:
    """Collection of lint rules over a vault's inline properties."""

    def __init__(self, vault: "Vault", strict: bool = False):
        self.vault = vault
        # strict: broken relations are errors instead of warnings
        self.strict = strict

    def run_all(self) -> list[LintResult]:
        """Run all lint checks and return findings."""
        results = []
        results.extend(self.check_broken_relations())
        results.extend(self.check_empty_values())
        results.extend(self.check_hidden_in_group())
        return results

    def check_broken_relations(self) -> list[LintResult]:
        results = []
        for note in self.vault.notes:
            for prop in note.properties:
                if isinstance(prop.value, Link):
                    targets = [prop.value.note]
                elif isinstance(prop.value, Links):
                    targets = list(prop.value.notes)
                else:
                    continue
                for target in targets:
                    if target.strip() and target not in self.vault:
                        results.append(
                            LintResult(
                                level="error" if self.strict else "warning",
                                rule="broken-relation",
                                file=note.path,
                                message=f"'{prop.key}' links to missing note '{target}'",
                                line=prop.line_number,
                            )
                        )
        return results

    def check_empty_values(self) -> list[LintResult]:
        results = []
        for note in self.vault.notes:
            for prop in note.properties:
                if not prop.raw_value:
                    results.append(
                        LintResult(
                            level="info",
                            rule="empty-value",
                            file=note.path,
                            message=f"'{prop.key}' has an empty value",
                            line=prop.line_number,
                        )
                    )
        return results

    def check_hidden_in_group(self) -> list[LintResult]:
        results = []
        for note in self.vault.notes:
            groups: dict[int, set[bool]] = {}
            lines: dict[int, int] = {}
            for prop in note.properties:
                if prop.group_id is None:
                    continue
                groups.setdefault(prop.group_id, set()).add(prop.hidden)
                lines.setdefault(prop.group_id, prop.line_number)
            for group_id, flags in groups.items():
                if len(flags) > 1:
                    results.append(
                        LintResult(
                            level="info",
                            rule="hidden-in-group",
                            file=note.path,
                            message=f"record {group_id} mixes hidden and visible properties",
                            line=lines[group_id],
                        )
                    )
        return results
