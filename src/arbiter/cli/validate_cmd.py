"""arbiter validate -- check case files without scoring them.

Reports every YAML and schema error of each file at once, in rich or
CI-friendly form, and exits 1 if any file is invalid.
"""

from __future__ import annotations

from pathlib import Path

import typer

from arbiter.loader.case_file import load_case_file
from arbiter.loader.errors import ErrorFormatter


def validate(
    case_files: list[str] = typer.Argument(..., help="Case files to validate"),
    ci: bool = typer.Option(False, "--ci", help="CI-friendly concise output"),
) -> None:
    """Validate case file YAML against the Arbiter schema."""
    formatter = ErrorFormatter(ci_mode=ci)

    files: list[Path] = []
    for name in case_files:
        path = Path(name)
        if not path.exists():
            typer.echo(f"Error: File not found: {name}", err=True)
            raise typer.Exit(code=1)
        files.append(path)

    valid_count = 0
    for path in files:
        _, errors = load_case_file(path)
        if errors:
            source = path.read_text(encoding="utf-8")
            typer.echo(formatter.format_all(errors, source, str(path)), err=not ci)
        else:
            valid_count += 1
            typer.echo(f"  {path} ... valid")

    typer.echo(f"\n{valid_count}/{len(files)} case files valid")

    if valid_count < len(files):
        raise typer.Exit(code=1)
