"""Lint command implementation."""

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..vault.loader import load_vault
from ..vault.rules import RULE_EXPLANATIONS, LintResult, PropertyRules


def run_lint(vault_path: Path, fail_on: str = "error", output_json: bool = False, strict: bool = False) -> int:
    """Run property lint checks on the vault.

    Args:
        vault_path: Path to vault directory
        fail_on: Exit with error if this level or higher found ("error" or "warning")
        output_json: Output results as JSON instead of human-readable
        strict: Report broken relations as errors

    Returns:
        Exit code (0 = success, 1 = failures found)
    """
    console = Console(stderr=True)

    console.print(f"Loading vault from {vault_path}...", style="dim")
    vault = load_vault(vault_path)

    results = PropertyRules(vault, strict=strict).run_all()

    # Sort by level (errors first)
    level_order = {"error": 0, "warning": 1, "info": 2}
    results.sort(key=lambda r: (level_order.get(r.level, 99), str(r.file), r.line or 0))

    counts = {"error": 0, "warning": 0, "info": 0}
    for r in results:
        counts[r.level] = counts.get(r.level, 0) + 1

    if output_json:
        _output_json(results, counts, len(vault.notes))
    else:
        _print_human_output(console, results, counts, len(vault.notes))

    if fail_on == "warning":
        if counts["error"] > 0 or counts["warning"] > 0:
            return 1
    else:  # fail_on == "error"
        if counts["error"] > 0:
            return 1

    return 0


def _output_json(results: list[LintResult], counts: dict[str, int], total_notes: int) -> None:
    output = {
        "errors": [r.to_dict() for r in results if r.level == "error"],
        "warnings": [r.to_dict() for r in results if r.level == "warning"],
        "info": [r.to_dict() for r in results if r.level == "info"],
        "summary": {
            "total_notes": total_notes,
            "errors": counts["error"],
            "warnings": counts["warning"],
            "info": counts["info"],
        },
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))


def _print_human_output(console: Console, results: list[LintResult], counts: dict[str, int], total_notes: int) -> None:
    for r in results:
        if r.level == "error":
            prefix, style = "ERROR", "bold red"
        elif r.level == "warning":
            prefix, style = "WARN", "yellow"
        else:
            prefix, style = "INFO", "dim"

        file_ref = r.file.name
        if r.line:
            file_ref += f":{r.line}"
        console.print(f"{prefix}: {escape(f'[{r.rule}]')} {file_ref} - {escape(r.message)}", style=style)

    console.print()
    if counts["error"] or counts["warning"]:
        status, status_style = "✗", "bold red" if counts["error"] else "yellow"
    else:
        status, status_style = "✓", "bold green"
    console.print(
        f"{status} {total_notes} note(s): {counts['error']} error(s), "
        f"{counts['warning']} warning(s), {counts['info']} info(s)",
        style=status_style,
    )


def run_explain(rule_id: str) -> int:
    """Print the explanation for a lint rule."""
    console = Console()
    explanation = RULE_EXPLANATIONS.get(rule_id)
    if explanation is None:
        err = Console(stderr=True)
        err.print(f"Unknown rule: {rule_id}", style="bold red")
        err.print(f"Available: {', '.join(sorted(RULE_EXPLANATIONS))}", style="dim")
        return 1

    console.print(f"{rule_id}", style="bold")
    console.print(escape(explanation))
    return 0
