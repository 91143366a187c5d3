"""Find-or-create of the per-project milestone."""

from ..config.models import GradingConfig
from ..errors import TrackerUnavailableError
from ..utils.logging import get_logger
from .api import GitHubAPI
from .models import Milestone

logger = get_logger(__name__)


def milestone_title(project: int) -> str:
    return f"Project {project}"


class MilestoneEnsurer:
    """Makes sure each project has exactly one ``Project <N>`` milestone.

    The lookup and the create are separate calls, so two runs racing on the
    same project can both miss the lookup. GitHub then rejects the second
    create, which surfaces as TrackerUnavailableError.
    """

    def __init__(self, api: GitHubAPI, config: GradingConfig):
        self.api = api
        self.config = config

    def find(self, title: str) -> Milestone | None:
        """Look up a milestone by exact title.

        Raises:
            TrackerUnavailableError: If the milestones cannot be listed
        """
        logger.info("Listing milestones...")
        listing = self.api.list_milestones()

        if listing.status != 200:
            logger.info(f"Result: {listing.text}")
            raise TrackerUnavailableError(
                f"Unable to list milestones (HTTP {listing.status}).",
                listing.status,
                listing.text,
            )

        for item in listing.data or []:
            if item.get("title") == title:
                return Milestone.from_api_response(item)
        return None

    def ensure(self, project: int) -> Milestone:
        """Return the project milestone, creating it when missing.

        Args:
            project: Project number

        Returns:
            The existing or newly created milestone

        Raises:
            TrackerUnavailableError: If listing or creation fails
            ConfigurationError: If the project has no display name
        """
        title = milestone_title(project)

        found = self.find(title)
        if found is not None:
            logger.info(f"Found {found.title} milestone.")
            return found

        description = f"Project {project} {self.config.project_name(project)}"
        created = self.api.create_milestone(title=title, state="open", description=description)

        if (
            created.status != 201
            or not isinstance(created.data, dict)
            or "number" not in created.data
        ):
            logger.info(f"Result: {created.text}")
            raise TrackerUnavailableError(
                f"Unable to create {title} milestone (HTTP {created.status}): {created.text}",
                created.status,
                created.text,
            )

        milestone = Milestone.from_api_response(created.data)
        logger.info(f"Created {milestone.title} milestone.")
        return milestone
