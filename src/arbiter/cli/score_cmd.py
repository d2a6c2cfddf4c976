"""arbiter score -- apply a case file's scorers to each of its cases.

Loads the case file and arbiter.yaml, resolves the judge and embedder
only when a configured scorer needs them, scores the cases one after
another, and renders a table or JSON. Exits 1 if any scorer raised.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
import yaml
from loguru import logger
from rich.console import Console

from arbiter.adapters.base import BaseEmbedder, BaseJudge, GenerationConfig
from arbiter.adapters.registry import get_embedder, get_judge
from arbiter.adapters.retry import RetryingEmbedder, RetryingJudge
from arbiter.cli.output import CaseOutcome, outcomes_to_json, render_table
from arbiter.evaluation.scorers import Scorer, build_scorer
from arbiter.loader.case_file import load_case_file
from arbiter.models.case import CaseFile
from arbiter.models.config import ProjectConfig, find_project_root, load_project_config

console = Console(stderr=True)

# Scorer kinds that call a judge or an embedder
JUDGE_KINDS = frozenset(
    {"answer_correctness", "faithfulness", "noise_sensitivity", "answer_relevancy", "context_recall"}
)
EMBEDDER_KINDS = frozenset({"answer_similarity", "answer_relevancy"})


def _needs_embedder(case_file: CaseFile) -> bool:
    for config in case_file.scorers:
        if config.kind in EMBEDDER_KINDS:
            return True
        if config.kind == "answer_correctness" and len(config.weights) == 2 and config.weights[1] > 0:
            return True
    return False


def build_capabilities(
    case_file: CaseFile, project: ProjectConfig
) -> tuple[BaseJudge | None, BaseEmbedder | None]:
    """Instantiate the judge and embedder the case file's scorers need.

    Raises:
        ValueError, ImportError, TypeError: If an adapter cannot be resolved.
    """
    retry = project.retry
    judge: BaseJudge | None = None
    embedder: BaseEmbedder | None = None

    if any(config.kind in JUDGE_KINDS for config in case_file.scorers):
        generation = GenerationConfig(
            model=project.judge.model,
            temperature=project.judge.temperature,
            max_tokens=project.judge.max_tokens,
        )
        judge = RetryingJudge(
            get_judge(project.judge.adapter, config=generation),
            max_retries=retry.max_retries,
            base_delay=retry.base_delay,
            max_delay=retry.max_delay,
        )

    if _needs_embedder(case_file):
        embedder = RetryingEmbedder(
            get_embedder(project.embedding.adapter, model=project.embedding.model),
            max_retries=retry.max_retries,
            base_delay=retry.base_delay,
            max_delay=retry.max_delay,
        )

    return judge, embedder


async def score_cases(case_file: CaseFile, scorers: list[Scorer]) -> list[CaseOutcome]:
    """Score every case with every scorer, sequentially.

    A scorer exception is recorded against its case and scoring continues.
    """
    outcomes: list[CaseOutcome] = []
    for index, case in enumerate(case_file.cases):
        outcome = CaseOutcome(label=case.name or f"case {index + 1}")
        for scorer in scorers:
            try:
                result = await scorer(
                    input=case.input, output=case.output, expected=case.expected
                )
            except Exception as exc:
                name = _display_name(scorer)
                logger.opt(exception=exc).debug("scorer {} failed on {}", name, outcome.label)
                outcome.errors[name] = f"{type(exc).__name__}: {exc}"
                continue
            outcome.results.append(result)
        outcomes.append(outcome)
    return outcomes


def _display_name(scorer: Scorer) -> str:
    return getattr(scorer, "display_name", scorer.__name__)


def score(
    case_path: str = typer.Argument(..., help="Path to case file YAML"),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Show debug logging"),
) -> None:
    """Score the cases of a case file and display results."""
    if verbose:
        logger.enable("arbiter")

    filepath = Path(case_path)
    if not filepath.exists():
        console.print(f"[bold red]Error:[/bold red] File not found: {case_path}")
        raise typer.Exit(code=1)

    case_file, errors = load_case_file(filepath)
    if errors:
        console.print("[bold red]Case file validation errors:[/bold red]")
        for err in errors:
            loc = f" (line {err.line})" if err.line else ""
            console.print(f"  {err.field}: {err.message}{loc}")
        raise typer.Exit(code=1)

    assert case_file is not None

    try:
        project = load_project_config(find_project_root(filepath))
        judge, embedder = build_capabilities(case_file, project)
        scorers = [build_scorer(config, judge, embedder) for config in case_file.scorers]
    except (ValueError, ImportError, TypeError, yaml.YAMLError) as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    outcomes = asyncio.run(score_cases(case_file, scorers))

    if format_json:
        typer.echo(outcomes_to_json(outcomes))
    else:
        render_table(outcomes, [_display_name(s) for s in scorers], Console())

    if any(outcome.errors for outcome in outcomes):
        raise typer.Exit(code=1)
