"""
GitHub REST API client for milestones.

Calls return an ApiResponse carrying the HTTP status rather than raising
on non-success codes; callers decide which statuses they accept. Transport
failures (DNS, refused connections, timeouts) raise TrackerUnavailableError.

GitHub REST documentation:
https://docs.github.com/en/rest/issues/milestones
"""

from typing import Any

import httpx

from ..config.models import DEFAULT_API_URL, DEFAULT_TIMEOUT, TrackerSettings
from ..errors import TrackerUnavailableError
from ..utils.logging import get_logger
from .models import ApiResponse

logger = get_logger(__name__)


class GitHubAPI:
    """
    Low-level GitHub REST API client scoped to one repository.

    Usage:
        with GitHubAPI(owner="usf-cs212", repo="project-student", token=token) as api:
            response = api.list_milestones()
    """

    API_VERSION = "2022-11-28"

    # GitHub maximum page size
    PER_PAGE = 100

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None = None,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the GitHub API client.

        Args:
            owner: Repository owner
            repo: Repository name
            token: Token with issues write access
            base_url: REST API root, differs on GitHub Enterprise
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.owner = owner
        self.repo = repo
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self.API_VERSION,
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"

            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "GitHubAPI":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _request(self, method: str, url: str, **kwargs: Any) -> tuple[ApiResponse, httpx.Response]:
        """
        Send one request.

        Raises:
            TrackerUnavailableError: If no response was received
        """
        logger.debug(f"{method} {url}")
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Request error calling {method} {url}: {e}")
            raise TrackerUnavailableError(f"Request failed: {e}") from e

        return ApiResponse.from_httpx(response), response

    def list_milestones(self, state: str = "all") -> ApiResponse:
        """
        List milestones of the repository, following pagination.

        Args:
            state: ``open``, ``closed`` or ``all``

        Returns:
            ApiResponse whose data holds every milestone on success, or the
            first unsuccessful page response
        """
        url: str | None = f"{self.repo_path}/milestones"
        params: dict[str, Any] | None = {"state": state, "per_page": self.PER_PAGE}
        milestones: list[dict[str, Any]] = []
        result = ApiResponse(status=200, data=milestones)

        while url:
            page, response = self._request("GET", url, params=params)
            if page.status != 200:
                return page
            if not isinstance(page.data, list):
                raise TrackerUnavailableError(
                    "Unexpected milestone listing payload.", page.status, page.text
                )

            milestones.extend(page.data)
            result = ApiResponse(
                status=page.status, data=milestones, text=page.text, headers=page.headers
            )

            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        return result

    def create_milestone(
        self,
        title: str,
        state: str = "open",
        description: str = "",
    ) -> ApiResponse:
        """
        Create a milestone.

        Returns:
            ApiResponse, status 201 with the new milestone on success
        """
        payload = {"title": title, "state": state, "description": description}
        response, _ = self._request("POST", f"{self.repo_path}/milestones", json=payload)
        return response


def create_api_client(
    settings: TrackerSettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> GitHubAPI:
    """
    Create a GitHubAPI client from settings.

    Args:
        settings: Connection settings, read from the environment if omitted
        transport: Optional httpx transport

    Returns:
        Configured GitHubAPI instance
    """
    settings = settings or TrackerSettings.from_env()
    return GitHubAPI(
        owner=settings.owner,
        repo=settings.repo,
        token=settings.token,
        base_url=settings.api_url,
        timeout=settings.timeout,
        transport=transport,
    )
