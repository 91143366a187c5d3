"""Issue tracker data models."""

from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass
class Milestone:
    """Represents a repository milestone."""

    number: int
    title: str
    state: str = "open"
    description: str = ""
    html_url: str = ""

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Milestone":
        """Create a Milestone from GitHub API response data."""
        return cls(
            number=data["number"],
            title=data.get("title", ""),
            state=data.get("state", "open"),
            description=data.get("description") or "",
            html_url=data.get("html_url", ""),
        )


@dataclass
class ApiResponse:
    """Status and decoded body of a tracker call."""

    status: int
    data: Any = None
    text: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ApiResponse":
        """Wrap an httpx response, tolerating bodies that are not JSON."""
        try:
            data = response.json() if response.content else None
        except ValueError:
            data = None

        return cls(
            status=response.status_code,
            data=data,
            text=response.text,
            headers=dict(response.headers),
        )
