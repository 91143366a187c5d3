"""Configuration data models."""

import os
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from types import MappingProxyType
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import ConfigurationError

DEFAULT_TIMEZONE = "America/Los_Angeles"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0

# Date-only deadlines close at the end of the day
END_OF_DAY = time(23, 59, 59)


def _local_deadline(value: Any, zone: ZoneInfo) -> datetime:
    """Convert a configured deadline into an aware datetime in ``zone``."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, END_OF_DAY)
    else:
        text = str(value).strip()
        try:
            if "T" in text or " " in text:
                parsed = datetime.fromisoformat(text)
            else:
                parsed = datetime.combine(date.fromisoformat(text), END_OF_DAY)
        except ValueError as e:
            raise ConfigurationError(f"Invalid deadline {text!r}: {e}") from e

    try:
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=zone)
        else:
            parsed = parsed.astimezone(zone)
        parsed.astimezone(timezone.utc)
    except OverflowError as e:
        raise ConfigurationError(f"Deadline {value!r} is out of range: {e}") from e
    return parsed


def _require_mapping(value: Any, section: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            f"{section} must be a mapping, got {type(value).__name__}."
        )
    return value


def _project_key(key: Any, section: str) -> int:
    """Read a project number key, accepting ``1`` and ``"1"``."""
    try:
        return int(str(key).strip())
    except ValueError as e:
        raise ConfigurationError(
            f"Project key {key!r} in {section} must be a number."
        ) from e


@dataclass(frozen=True)
class GradingConfig:
    """Deadline and project name tables used for grading.

    Deadlines are keyed by lower-case submission type, then project number.
    Values are wall-clock times in ``timezone``.
    """

    timezone: str = DEFAULT_TIMEZONE
    deadlines: Mapping[str, Mapping[int, Any]] = field(default_factory=dict)
    names: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self):
        deadlines = _require_mapping(self.deadlines, "deadlines")
        object.__setattr__(
            self,
            "deadlines",
            MappingProxyType(
                {
                    str(kind).lower(): MappingProxyType(
                        {
                            _project_key(project, f"deadlines.{kind}"): value
                            for project, value in _require_mapping(
                                table, f"deadlines.{kind}"
                            ).items()
                        }
                    )
                    for kind, table in deadlines.items()
                }
            ),
        )
        object.__setattr__(
            self,
            "names",
            MappingProxyType(
                {
                    _project_key(project, "names"): str(name)
                    for project, name in _require_mapping(self.names, "names").items()
                }
            ),
        )

        # Fail on load rather than on first use
        zone = self.zone
        for table in self.deadlines.values():
            for value in table.values():
                _local_deadline(value, zone)

    @property
    def zone(self) -> ZoneInfo:
        """Reference time zone for every deadline comparison."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown time zone: {self.timezone}") from e

    def deadline_for(self, submission_type: str, project: int) -> datetime:
        """Get the deadline for a submission type and project.

        Raises:
            ConfigurationError: If no deadline is configured for the pair
        """
        kind = submission_type.lower()
        table = self.deadlines.get(kind, {})
        if project not in table:
            raise ConfigurationError(
                f"No {kind} deadline configured for project {project}."
            )
        return _local_deadline(table[project], self.zone)

    def project_name(self, project: int) -> str:
        """Get the display name of a project.

        Raises:
            ConfigurationError: If the project has no display name
        """
        if project not in self.names:
            raise ConfigurationError(f"No display name configured for project {project}.")
        return self.names[project]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GradingConfig":
        return cls(
            timezone=data.get("timezone", DEFAULT_TIMEZONE),
            deadlines=data.get("deadlines") or {},
            names=data.get("names") or {},
        )


@dataclass
class TrackerSettings:
    """GitHub connection settings."""

    repository: str
    token: str | None = None
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT

    @property
    def owner(self) -> str:
        return self._split()[0]

    @property
    def repo(self) -> str:
        return self._split()[1]

    def _split(self) -> tuple[str, str]:
        owner, _, repo = self.repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise ConfigurationError(
                f"Repository must be given as owner/repo, got {self.repository!r}."
            )
        return owner, repo

    @classmethod
    def from_env(cls, token: str | None = None) -> "TrackerSettings":
        """Build settings from the variables GitHub Actions provides."""
        timeout = os.getenv("GRADER_TIMEOUT", "")
        try:
            timeout_value = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ConfigurationError(f"GRADER_TIMEOUT must be a number, got {timeout!r}.") from e

        return cls(
            repository=os.getenv("GITHUB_REPOSITORY", ""),
            token=token if token is not None else os.getenv("GITHUB_TOKEN"),
            api_url=os.getenv("GITHUB_API_URL") or DEFAULT_API_URL,
            timeout=timeout_value,
        )
