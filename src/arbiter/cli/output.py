"""Rich terminal output and JSON rendering for scored case files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from arbiter.models.result import ScoreResult


@dataclass
class CaseOutcome:
    """Scores for one case, keyed by scorer name.

    A scorer that raised is recorded in ``errors`` instead of ``results``.
    """

    label: str
    results: list[ScoreResult] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)


def _score_style(score: float) -> str:
    if score >= 0.8:
        return "green"
    if score >= 0.5:
        return "yellow"
    return "red"


def render_table(
    outcomes: list[CaseOutcome], scorer_names: list[str], console: Console
) -> None:
    """Render one row per case and one column per scorer."""
    table = Table(box=box.SIMPLE, padding=(0, 2))
    table.add_column("Case", style="bold")
    for name in scorer_names:
        table.add_column(name, justify="right")

    for outcome in outcomes:
        by_name = {r.name: r for r in outcome.results}
        cells: list[str] = []
        for name in scorer_names:
            if name in outcome.errors:
                cells.append("[bold red]ERROR[/bold red]")
            elif name in by_name:
                score = by_name[name].score
                style = _score_style(score)
                cells.append(f"[{style}]{score:.2f}[/{style}]")
            else:
                cells.append("-")
        table.add_row(outcome.label, *cells)

    console.print()
    console.print(table)

    for outcome in outcomes:
        for name, message in outcome.errors.items():
            console.print(f"[red]{outcome.label} / {name}:[/red] {message}")


def outcomes_to_json(outcomes: list[CaseOutcome]) -> str:
    """Serialize outcomes as a JSON array for machine consumption."""
    payload: list[dict[str, Any]] = [
        {
            "case": outcome.label,
            "results": [r.model_dump(mode="json") for r in outcome.results],
            "errors": outcome.errors,
        }
        for outcome in outcomes
    ]
    return json.dumps(payload, indent=2, default=str)
