"""Data models for vault notes."""

from dataclasses import dataclass, field
from pathlib import Path

from .properties import InlineProperty


@dataclass
class Note:
    """A markdown note and the inline properties found in it."""

    path: Path
    name: str  # filename without extension
    text: str  # raw file text, frontmatter included
    content: str  # markdown after frontmatter
    frontmatter: dict  # parsed YAML
    properties: list[InlineProperty] = field(default_factory=list)

    @property
    def title(self) -> str:
        """Frontmatter title, first H1 header, or the filename."""
        if self.frontmatter.get("title"):
            return str(self.frontmatter["title"])
        for line in self.content.split("\n"):
            if line.startswith("# "):
                return line[2:].strip()
        return self.name

    @property
    def aliases(self) -> list[str]:
        aliases = self.frontmatter.get("aliases", [])
        if isinstance(aliases, str):
            aliases = [aliases]
        return [str(a) for a in aliases]

    def visible_properties(self) -> list[InlineProperty]:
        return [p for p in self.properties if not p.hidden]

    def get(self, key: str) -> list[InlineProperty]:
        """All properties named ``key`` in document order."""
        return [p for p in self.properties if p.key == key]
