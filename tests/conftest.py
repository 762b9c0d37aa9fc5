"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from vaultprops.vault.loader import Vault, load_vault


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path


@pytest.fixture
def vault_path(tmp_path: Path) -> Path:
    """A small notes vault with books, authors and a hidden folder."""
    vault = tmp_path / "notes"
    _write(
        vault / "libros" / "Quijote.md",
        "\n".join(
            [
                "---",
                "title: Don Quijote",
                "---",
                "",
                "# Don Quijote",
                "",
                "[tipo::libro]",
                "[autor::@Cervantes]",
                "[precio:::100]",
                "[año::1605, paginas::863]",
                "Leído: [leido::true] [relacionado::@Hamlet]",
                "",
            ]
        ),
    )
    _write(
        vault / "autores" / "Cervantes.md",
        "\n".join(
            [
                "---",
                "aliases: [Miguel de Cervantes]",
                "---",
                "",
                "# Miguel de Cervantes",
                "",
                "[nacimiento::1547-09-29]",
                "[obras::, @Quijote, @Novelas ejemplares]",
                "[estado::]",
                "",
            ]
        ),
    )
    _write(
        vault / "Lecturas.md",
        "[juego::Zelda, comprado::2024-05-01]\n[juego::Celeste, comprado:::2023-01-15]\n",
    )
    _write(vault / ".trash" / "Borrada.md", "[tipo::basura]\n")
    return vault


@pytest.fixture
def vault(vault_path: Path) -> Vault:
    return load_vault(vault_path)
