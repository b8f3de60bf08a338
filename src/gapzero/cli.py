"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from gapzero.config import load_config
from gapzero.errors import GapZeroError
from gapzero.models.ats import ATSScoreResult
from gapzero.models.events import ProgressEvent
from gapzero.models.request import AnalysisRequest, Questionnaire, UploadedDocument
from gapzero.models.result import AnalysisResult
from gapzero.parsers.document_parser import parse_pdf
from gapzero.pipeline.orchestrator import AnalysisOrchestrator
from gapzero.pipeline.progress import ProgressChannel
from gapzero.usage import summarize_usage

app = typer.Typer(
    name="gapzero",
    help="CV gap analysis, career planning and ATS scoring",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=verbose, show_path=False)],
        force=True,
    )


def load_questionnaire(path: Path) -> Questionnaire:
    """Read a questionnaire from a JSON or YAML file."""
    raw = path.read_text(encoding="utf-8")
    data = json.loads(raw) if path.suffix.lower() == ".json" else yaml.safe_load(raw)
    return Questionnaire.model_validate(data or {})


def _build_orchestrator() -> AnalysisOrchestrator:
    try:
        return AnalysisOrchestrator.from_config(load_config())
    except GapZeroError as e:
        console.print(f"[red]{e.message}[/red] (set ANTHROPIC_API_KEY in the environment or .env)")
        raise typer.Exit(1)


def _print_usage(orchestrator: AnalysisOrchestrator) -> None:
    usage = summarize_usage(orchestrator.gateway.llm.get_token_summary())
    console.print(
        f"[dim]{usage.calls} calls, {usage.input_tokens:,} input / "
        f"{usage.output_tokens:,} output tokens, ~${usage.estimated_cost_usd:.4f}[/dim]"
    )


def _print_summary(result: AnalysisResult, total_time: str | None) -> None:
    fit = result.fit_score
    color = "green" if fit.score >= 8 else "yellow" if fit.score >= 5 else "red"
    lines = [
        f"[bold {color}]{fit.label}: {fit.score}/10[/bold {color}]",
        fit.summary,
        "",
        f"Strengths: {len(result.strengths)} | Gaps: {len(result.gaps)} | "
        f"Roles: {len(result.role_recommendations)}",
    ]
    target = result.salary_analysis.target_role_market
    if target.mid:
        lines.append(f"Target salary (mid): {target.mid:,} {target.currency}")
    if result.job_match is not None:
        lines.append(f"Job match: {result.job_match.match_score}/100")
    if result.ats_score is not None:
        lines.append(f"ATS score: {result.ats_score.overall_score}/100")
    if total_time:
        lines.append(f"Time: {total_time}s")
    console.print(Panel("\n".join(lines), title="GapZero analysis"))


def _print_ats(result: ATSScoreResult) -> None:
    console.print(
        Panel(
            f"Overall: [bold]{result.overall_score}[/bold] | "
            f"Keywords: {result.keyword_score} | Format: {result.format_score}",
            title="ATS score",
        )
    )
    table = Table(title="Keywords")
    table.add_column("Keyword")
    table.add_column("Category")
    table.add_column("Status")
    for bucket, label, style in (
        (result.keywords.matched, "matched", "green"),
        (result.keywords.semantic_match, "semantic", "yellow"),
        (result.keywords.missing, "missing", "red"),
    ):
        for kw in bucket:
            table.add_row(kw.keyword, kw.category, f"[{style}]{label}[/{style}]")
    console.print(table)
    for issue in result.format_issues:
        console.print(f"  {issue.severity.upper()}: {issue.description}")
    if result.company_ats is not None:
        console.print(f"\n[bold]{result.company_ats.company}[/bold] uses {result.company_ats.ats_system}")
        for tip in result.company_ats.tips:
            console.print(f"  - {tip}")


@app.command()
def analyze(
    cv_path: Path = typer.Argument(help="CV file (PDF)"),
    questionnaire_path: Path = typer.Option(..., "--questionnaire", "-q", help="Questionnaire JSON/YAML file"),
    job_posting: Path = typer.Option(None, "--job-posting", "-j", help="Job posting text file"),
    linkedin: Path = typer.Option(None, "--linkedin", help="LinkedIn profile export (PDF)"),
    language: str = typer.Option(None, "--language", "-l", help="Report language code, e.g. de"),
    output: Path = typer.Option(None, "--output", "-o", help="Output JSON path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Analyze a CV against the target role in the questionnaire."""
    _setup_logging(verbose)
    for path in (cv_path, questionnaire_path, job_posting, linkedin):
        if path is not None and not path.exists():
            console.print(f"[red]File not found: {path}[/red]")
            raise typer.Exit(1)

    try:
        questionnaire = load_questionnaire(questionnaire_path)
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid questionnaire: {e}[/red]")
        raise typer.Exit(1)

    updates: dict = {}
    if job_posting is not None:
        updates["job_posting"] = job_posting.read_text(encoding="utf-8")
    if language:
        updates["language"] = language
    if updates:
        questionnaire = questionnaire.model_copy(update=updates)

    companion = None
    if linkedin is not None:
        companion = UploadedDocument(filename=linkedin.name, content=linkedin.read_bytes())
    request = AnalysisRequest(
        questionnaire=questionnaire,
        cv=UploadedDocument(filename=cv_path.name, content=cv_path.read_bytes()),
        companion=companion,
    )

    orchestrator = _build_orchestrator()
    final: ProgressEvent | None = None

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
    ) as progress:
        task = progress.add_task("Starting...", total=100)

        async def run() -> ProgressEvent | None:
            channel = ProgressChannel()
            producer = asyncio.create_task(orchestrator.stream(request, channel))
            last = None
            async for event in channel:
                if event.progress is not None:
                    progress.update(task, completed=event.progress)
                if event.message:
                    progress.update(task, description=event.message)
                last = event
            await producer
            return last

        final = asyncio.run(run())

    if final is None or final.step != "complete":
        message = final.message if final is not None else "No result"
        console.print(f"[red]Analysis failed: {message}[/red]")
        raise typer.Exit(1)

    result = AnalysisResult.model_validate(final.data)
    if output is None:
        output = Path(f"./output/gapzero_{questionnaire.target_role}.json".replace(" ", "_"))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(final.data, indent=2, ensure_ascii=False), encoding="utf-8")
    console.print(f"\n[green]Report saved: {output}[/green]")

    _print_summary(result, final.total_time)
    _print_usage(orchestrator)


@app.command("ats-score")
def ats_score(
    cv_path: Path = typer.Argument(help="CV file (PDF or text)"),
    job_posting: Path = typer.Option(..., "--job-posting", "-j", help="Job posting text file"),
    company: str = typer.Option(None, "--company", "-c", help="Company name for ATS tips"),
    job_url: str = typer.Option(None, "--job-url", help="Job posting URL"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Score a CV against a job posting the way an ATS would."""
    _setup_logging(verbose)
    for path in (cv_path, job_posting):
        if not path.exists():
            console.print(f"[red]File not found: {path}[/red]")
            raise typer.Exit(1)

    orchestrator = _build_orchestrator()
    posting = job_posting.read_text(encoding="utf-8")

    async def run() -> ATSScoreResult:
        document = None
        if cv_path.suffix.lower() == ".pdf":
            document = await parse_pdf(cv_path.read_bytes())
            cv_text = document.text
        else:
            cv_text = cv_path.read_text(encoding="utf-8")
        return await orchestrator.ats_scorer.score(
            cv_text, posting, document=document, company_name=company, job_url=job_url
        )

    with console.status("Scoring..."):
        try:
            result = asyncio.run(run())
        except GapZeroError as e:
            console.print(f"[red]{e.title}: {e.message}[/red]")
            raise typer.Exit(1)

    _print_ats(result)
    _print_usage(orchestrator)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from gapzero.api.app import create_app

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    app()
