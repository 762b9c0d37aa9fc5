"""CLI entrypoint for vaultprops."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__


def _auto_detect_vault(start: Path) -> Path | None:
    """Find a ./notes vault folder by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if p.is_dir() and p.name.lower() == "notes":
            return p
        candidate = p / "notes"
        if candidate.is_dir():
            return candidate
    return None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="vaultprops")
@click.option(
    "--vault",
    "-v",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    envvar="VAULTPROPS_VAULT",
    help="Path to the notes directory (defaults to $VAULTPROPS_VAULT or an auto-detected ./notes)",
)
@click.option("--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, verbose: bool) -> None:
    """vaultprops - Typed inline properties for plain-text notes.

    Read, edit and check [key::value] properties written inside notes.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    if vault is None:
        detected = _auto_detect_vault(Path.cwd())
        if detected is None:
            raise click.ClickException("Vault not found. Pass --vault /path/to/notes or set VAULTPROPS_VAULT.")
        vault = detected

    if not vault.exists() or not vault.is_dir():
        raise click.BadParameter(f"Directory '{vault}' does not exist.", param_hint="--vault / -v")

    ctx.obj["vault"] = vault.resolve()


@cli.command("list")
@click.argument("note")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--show-hidden", is_flag=True, help="Include hidden (:::) properties")
@click.pass_context
def list_cmd(ctx: click.Context, note: str, output_json: bool, show_hidden: bool) -> None:
    """List the inline properties of NOTE.

    Examples:

        vaultprops list Quijote

        vaultprops list libros/Quijote.md --json --show-hidden
    """
    from .commands.props_cmd import run_list

    exit_code = run_list(ctx.obj["vault"], note, output_json=output_json, show_hidden=show_hidden)
    sys.exit(exit_code)


@cli.command("set")
@click.argument("note")
@click.argument("key")
@click.argument("value")
@click.option(
    "--index",
    type=int,
    default=1,
    show_default=True,
    help="Which occurrence of KEY to replace (1 = first)",
)
@click.pass_context
def set_cmd(ctx: click.Context, note: str, key: str, value: str, index: int) -> None:
    """Replace the value of property KEY in NOTE.

    The bracket is rewritten as [KEY::VALUE]. Hidden properties become
    visible and grouped records collapse to the single property.

    Examples:

        vaultprops set Quijote precio 200
    """
    from .commands.props_cmd import run_set

    exit_code = run_set(ctx.obj["vault"], note, key, value, index=index)
    sys.exit(exit_code)


@cli.command("add")
@click.argument("note")
@click.argument("line", type=int)
@click.argument("key")
@click.argument("value")
@click.pass_context
def add_cmd(ctx: click.Context, note: str, line: int, key: str, value: str) -> None:
    """Append [KEY::VALUE] to LINE (1-indexed) of NOTE.

    Examples:

        vaultprops add Quijote 3 leido true
    """
    from .commands.props_cmd import run_add

    exit_code = run_add(ctx.obj["vault"], note, line, key, value)
    sys.exit(exit_code)


@cli.command()
@click.argument("note", required=False)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def records(ctx: click.Context, note: str | None, output_json: bool) -> None:
    """Show grouped records ([a::1, b::2]) as table rows.

    Without NOTE, records from every note in the vault are listed.
    """
    from .commands.props_cmd import run_records

    exit_code = run_records(ctx.obj["vault"], note, output_json=output_json)
    sys.exit(exit_code)


@cli.command()
@click.option(
    "--fail-on",
    type=click.Choice(["error", "warning"]),
    default="error",
    help="Exit with error if this level or higher found",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output results as JSON",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Report broken relations as errors instead of warnings",
)
@click.option(
    "--explain",
    "explain_rule",
    type=str,
    default=None,
    metavar="RULE_ID",
    help="Explain a specific rule and exit (e.g., --explain broken-relation)",
)
@click.pass_context
def lint(ctx: click.Context, fail_on: str, output_json: bool, strict: bool, explain_rule: str | None) -> None:
    """Check inline properties across the vault.

    Rules:
    - broken-relation: @Name points to a note that does not exist
    - empty-value: [key::] with nothing after the separator
    - hidden-in-group: a record mixes ::: and :: pairs

    With --strict, broken relations are errors.
    """
    from .commands.lint import run_explain, run_lint

    if explain_rule:
        exit_code = run_explain(explain_rule)
        sys.exit(exit_code)

    exit_code = run_lint(ctx.obj["vault"], fail_on, output_json, strict)
    sys.exit(exit_code)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
