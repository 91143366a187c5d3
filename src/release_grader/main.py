#!/usr/bin/env python3
"""
Release Grader action

Entry points for the two steps of the grading action. The setup step saves
the release that triggered the workflow; the main step restores it, grades
it against the deadline and, when enabled, ensures the project milestone.
"""

from dataclasses import dataclass
from typing import Callable

from dotenv import load_dotenv

from .config.loader import ConfigLoader
from .config.models import GradingConfig, TrackerSettings
from .errors import ConfigurationError, TrackerUnavailableError, UnsupportedTypeError
from .grading.grader import GradeCalculator, GradeResult
from .release import SubmissionType, parse_project
from .tracker.api import GitHubAPI, create_api_client
from .tracker.milestones import MilestoneEnsurer
from .tracker.models import Milestone
from .utils.logging import get_logger, log_group, mask_secret, setup_logging, show_error
from .utils.workflow import (
    WorkflowState,
    get_boolean_input,
    get_input,
    read_event,
    restore_states,
    save_state,
    set_failed,
    set_output,
)

logger = get_logger(__name__)


@dataclass
class RunResult:
    """Outcome of one grading run."""

    project: int
    type: str
    grade: GradeResult | None = None
    milestone: Milestone | None = None


class RunDispatcher:
    """Routes a restored release to the grading path for its type."""

    def __init__(
        self,
        states: WorkflowState,
        grading_config: GradingConfig,
        api_factory: Callable[[], GitHubAPI] | None = None,
        ensure_milestone: bool = False,
    ):
        """Initialize the dispatcher.

        Args:
            states: Values saved by the setup step
            grading_config: Deadline and project name tables
            api_factory: Builds the tracker client, only called when the
                milestone step runs
            ensure_milestone: Find or create the project milestone after grading
        """
        self.states = states
        self.config = grading_config
        self.api_factory = api_factory or create_api_client
        self.ensure_milestone = ensure_milestone
        self.calculator = GradeCalculator(grading_config)

    def run(self) -> RunResult:
        """Grade the release.

        Raises:
            ParseError: If the release tag names no project
            UnsupportedTypeError: If the submission type has no grading path
        """
        project = parse_project(self.states.release)
        submission_type = self.states.type
        title = f"Project {self.states.release} {submission_type} Grade"

        logger.info(f"Requesting {title}...")

        if submission_type == SubmissionType.FUNCTIONALITY.value:
            result = RunResult(project=project, type=submission_type)
            result.grade = self.calculator.calculate(
                self.states.release_date, project, submission_type
            )
            if self.ensure_milestone:
                result.milestone = self._ensure_milestone(project)
            return result

        if submission_type == SubmissionType.DESIGN.value:
            logger.info("Hello world.")
            return RunResult(project=project, type=submission_type)

        raise UnsupportedTypeError(submission_type)

    def _ensure_milestone(self, project: int) -> Milestone:
        with log_group("Ensuring project milestone..."):
            with self.api_factory() as api:
                return MilestoneEnsurer(api, self.config).ensure(project)


def describe_error(error: Exception) -> str:
    """Build the detailed error text shown in the log."""
    detail = f"{type(error).__name__}: {error}"
    if isinstance(error, TrackerUnavailableError) and error.body:
        detail = f"{detail}\nResponse: {error.body}"
    return detail


def fail(prefix: str, error: Exception) -> int:
    """Report a failure and return the exit code for it."""
    show_error(f"{describe_error(error)}\n")
    set_failed(f"{prefix} {error}")
    return 1


def _publish(result: RunResult) -> None:
    set_output("project", result.project)
    if result.grade is not None:
        set_output("late", result.grade.late)
        set_output("grade", result.grade.grade)
    if result.milestone is not None:
        set_output("milestone", result.milestone.number)


def main() -> int:
    """Main step: grade the release saved by the setup step.

    Returns:
        Process exit code
    """
    load_dotenv()
    setup_logging()

    try:
        token = get_input("token")
        mask_secret(token)

        grading_config = ConfigLoader().load_grading(get_input("config") or None)
        states = restore_states()

        def api_factory() -> GitHubAPI:
            settings = TrackerSettings.from_env(token or None)
            mask_secret(settings.token)
            return create_api_client(settings)

        dispatcher = RunDispatcher(
            states=states,
            grading_config=grading_config,
            api_factory=api_factory,
            ensure_milestone=get_boolean_input("milestone"),
        )
        result = dispatcher.run()
        _publish(result)

    except Exception as e:
        return fail("Unable to request project grade.", e)

    return 0


def setup() -> int:
    """Setup step: save the triggering release for the main step.

    Returns:
        Process exit code
    """
    load_dotenv()
    setup_logging()

    try:
        mask_secret(get_input("token"))

        release = read_event().get("release")
        if not release:
            raise ConfigurationError("The workflow was not triggered by a release event.")

        missing = [key for key in ("tag_name", "created_at") if not release.get(key)]
        if missing:
            raise ConfigurationError(f"Release payload is missing: {', '.join(missing)}.")

        submission_type = get_input("type", required=True)

        save_state("release", release["tag_name"])
        save_state("releaseDate", release["created_at"])
        save_state("releaseUrl", release.get("html_url", ""))
        save_state("type", submission_type)

        logger.info(f"Saved release {release['tag_name']} created {release['created_at']}.")

    except Exception as e:
        return fail("Unable to set up project grade.", e)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
