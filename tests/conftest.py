import json
import logging
import os

import pytest

from release_grader.config.models import GradingConfig
from release_grader.tracker.models import ApiResponse
from release_grader.utils import logging as grader_logging
from release_grader.utils.logging import SecretFilter

RUNNER_VARIABLES = (
    "GITHUB_ACTIONS",
    "GITHUB_STATE",
    "GITHUB_OUTPUT",
    "GITHUB_EVENT_PATH",
    "GITHUB_REPOSITORY",
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "GRADER_CONFIG",
    "GRADER_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_runner(monkeypatch, tmp_path):
    """Isolate each test from the runner environment and logging state."""
    for name in list(os.environ):
        if name in RUNNER_VARIABLES or name.startswith(("INPUT_", "STATE_")):
            monkeypatch.delenv(name, raising=False)
    # Keep load_dotenv away from any developer .env
    monkeypatch.chdir(tmp_path)

    grader_logging.clear_secrets()
    grader_logging._open_groups.clear()
    yield
    grader_logging.clear_secrets()
    grader_logging._open_groups.clear()

    root = logging.getLogger()
    for handler in root.handlers[:]:
        if any(isinstance(f, SecretFilter) for f in handler.filters):
            root.removeHandler(handler)


@pytest.fixture
def grading_config() -> GradingConfig:
    return GradingConfig(
        timezone="America/Los_Angeles",
        deadlines={
            "functionality": {1: "2020-02-16T21:00:00", 2: "2020-03-02T21:00:00"},
            "design": {1: "2020-03-01"},
        },
        names={1: "Inverted Index", 2: "Partial Search"},
    )


class FakeTracker:
    """In-memory milestone store that answers like the GitHub API."""

    def __init__(self, milestones=None, list_status=200, create_status=201):
        self.milestones = [dict(m) for m in milestones or []]
        self.list_status = list_status
        self.create_status = create_status
        self.list_calls = 0
        self.create_calls = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.closed = True

    def list_milestones(self):
        self.list_calls += 1
        if self.list_status != 200:
            body = {"message": "Server Error"}
            return ApiResponse(status=self.list_status, data=body, text=json.dumps(body))
        data = [dict(m) for m in self.milestones]
        return ApiResponse(status=200, data=data, text=json.dumps(data))

    def create_milestone(self, title, state="open", description=""):
        self.create_calls.append({"title": title, "state": state, "description": description})
        if self.create_status != 201:
            body = {"message": "Validation Failed", "errors": [{"code": "already_exists"}]}
            return ApiResponse(status=self.create_status, data=body, text=json.dumps(body))

        record = {
            "number": len(self.milestones) + 1,
            "title": title,
            "state": state,
            "description": description,
            "html_url": f"https://github.com/usf/project/milestone/{len(self.milestones) + 1}",
        }
        self.milestones.append(record)
        return ApiResponse(status=201, data=dict(record), text=json.dumps(record))


@pytest.fixture
def tracker_factory():
    return FakeTracker
