"""Console script for release_grader."""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from . import main as action
from .config.loader import ConfigLoader
from .config.models import TrackerSettings
from .errors import GraderError
from .grading.grader import GradeCalculator
from .release import SubmissionType, parse_project
from .tracker.api import create_api_client
from .tracker.milestones import MilestoneEnsurer
from .utils.logging import mask_secret, setup_logging

app = typer.Typer(help="Grade project releases against their deadlines.")
console = Console()


@app.command()
def run():
    """Main action step: grade the release saved by the setup step."""
    raise typer.Exit(action.main())


@app.command()
def setup():
    """Action setup step: save the release that triggered the workflow."""
    raise typer.Exit(action.setup())


@app.command()
def grade(
    release: str = typer.Argument(..., help="Release tag, e.g. v1.0.2"),
    created: str = typer.Argument(..., help="ISO-8601 release creation time"),
    submission_type: SubmissionType = typer.Option(
        SubmissionType.FUNCTIONALITY, "--type", "-t", help="Submission type"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Grading YAML file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show calculation steps"),
):
    """Compute the grade for a release without touching GitHub."""
    if verbose:
        setup_logging(actions=False)

    try:
        grading_config = ConfigLoader().load_grading(config)
        project = parse_project(release)
        result = GradeCalculator(grading_config).calculate(
            created, project, submission_type.value
        )
    except GraderError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Project {release} {submission_type.value} Grade")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Created", result.created)
    table.add_row("Deadline", result.deadline)
    table.add_row("Weeks late", str(result.late))
    table.add_row("Grade", str(result.grade))
    console.print(table)


@app.command()
def milestone(
    project: int = typer.Argument(..., min=1, max=4, help="Project number"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Grading YAML file"),
):
    """Find or create the milestone for a project.

    Reads GITHUB_REPOSITORY and GITHUB_TOKEN from the environment or a .env file.
    """
    load_dotenv()
    setup_logging(actions=False)

    try:
        settings = TrackerSettings.from_env()
        mask_secret(settings.token)
        grading_config = ConfigLoader().load_grading(config)
        with create_api_client(settings) as api:
            found = MilestoneEnsurer(api, grading_config).ensure(project)
    except GraderError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]{found.title}[/green] #{found.number} ({found.state}) {found.html_url}")


if __name__ == "__main__":
    app()
