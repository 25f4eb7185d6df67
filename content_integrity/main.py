"""CLI entry point for Content Integrity."""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import load_config
from .judgment.static import StaticJudge
from .orchestrator import AnalysisOrchestrator, DocumentAnalysis
from .similarity import similarity_breakdown
from .utils.logging import EvidenceAudit, SubstitutedEvidence, setup_logging
from .utils.metrics import format_duration, get_operation_metrics

app = typer.Typer(
    name="content-integrity",
    help="Plagiarism and AI-content detection for plain-text documents",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"content-integrity version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = False,
) -> None:
    """Content Integrity - document detection engine."""
    pass


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return path.read_text(encoding="latin-1")


@app.command()
def analyze(
    path: Annotated[
        Path,
        typer.Argument(
            help="Plain-text document to analyze",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the full analysis as JSON"),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path"),
    ] = None,
    offline: Annotated[
        bool,
        typer.Option("--offline", help="Skip the LLM: corpus comparison only, segments score 0"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Enable verbose logging"),
    ] = False,
) -> None:
    """Analyze a document for plagiarism and AI-generated content."""
    config = load_config(config_file)
    setup_logging("DEBUG" if verbose else config.log_level, config.log_file)

    text = _read_text(path)
    if not text.strip():
        console.print("[red]Document is empty[/red]")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[bold blue]Analyzing:[/bold blue] {path}\n"
            f"[dim]Judge:[/dim] {'offline' if offline else config.llm.model_name}\n"
            f"[dim]Segment size:[/dim] {config.detection.ai_segment_size} words",
            title="Content Integrity",
        )
    )

    if offline:
        orchestrator = AnalysisOrchestrator(StaticJudge(), config)
    else:
        orchestrator = AnalysisOrchestrator.from_config(config)

    async def run() -> DocumentAnalysis:
        try:
            return await orchestrator.analyze(text)
        finally:
            await orchestrator.close()

    with EvidenceAudit() as audit:
        analysis = asyncio.run(run())

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(
            json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
        )

    _print_analysis_summary(analysis, output, audit.substitutions)


@app.command()
def compare(
    first: Annotated[Path, typer.Argument(help="First text file", exists=True, dir_okay=False)],
    second: Annotated[Path, typer.Argument(help="Second text file", exists=True, dir_okay=False)],
    ngram_size: Annotated[
        Optional[int],
        typer.Option("--ngram", "-n", min=1, help="N-gram size (default: detection.ngram_size)"),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path"),
    ] = None,
) -> None:
    """Print the lexical similarity metrics for two text files."""
    if ngram_size is None:
        ngram_size = load_config(config_file).detection.ngram_size
    scores = similarity_breakdown(_read_text(first), _read_text(second), ngram_size)

    table = Table(title=f"Similarity (n-gram size {ngram_size})")
    table.add_column("Metric", style="cyan")
    table.add_column("Score", justify="right")
    for name, score in scores.items():
        table.add_row(name, f"{score:.4f}")
    console.print(table)


@app.command()
def config(
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path"),
    ] = None,
) -> None:
    """Show the effective configuration."""
    cfg = load_config(config_file)
    console.print_json(json.dumps(cfg.model_dump(mode="json")))


def _print_analysis_summary(
    analysis: DocumentAnalysis,
    output_path: Path | None,
    substitutions: list[SubstitutedEvidence],
) -> None:
    table = Table(title="Analysis Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Words", str(analysis.word_count))
    table.add_row("Plagiarism", f"{analysis.plagiarism.overall_percentage:.2f}%")
    table.add_row("Sources", str(analysis.plagiarism.total_sources))
    table.add_row("AI content", f"{analysis.ai_content.overall_percentage:.2f}%")
    table.add_row("Segments", str(len(analysis.ai_content.segments)))
    table.add_row("Confidence", f"{analysis.combined_confidence:.2f}")

    inference = get_operation_metrics().timing.get("llm_inference")
    if inference:
        table.add_row("LLM time", f"{format_duration(inference.total_time)} ({inference.count} calls)")
    if substitutions:
        table.add_row("[yellow]Substituted evidence[/yellow]", str(len(substitutions)))

    console.print(table)

    if substitutions:
        audit = Table(title="Substituted Evidence", title_style="yellow")
        audit.add_column("Source")
        audit.add_column("Level")
        audit.add_column("Reason", overflow="fold")
        for item in substitutions:
            audit.add_row(escape(item.source), item.level, escape(item.message))
        console.print(audit)

    if analysis.plagiarism.matches:
        matches = Table(title="Matches")
        matches.add_column("Source")
        matches.add_column("Type")
        matches.add_column("Similarity", justify="right")
        for match in analysis.plagiarism.matches:
            matches.add_row(
                match.source_title or match.source_url or "-",
                match.source_type,
                f"{match.similarity_score:.2f}",
            )
        console.print(matches)

    if output_path:
        console.print(f"\n[dim]Results saved to:[/dim] {output_path}")


if __name__ == "__main__":
    app()
