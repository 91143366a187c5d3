"""Release tag parsing."""

import re
from enum import Enum

from .errors import ParseError

# v<project>.<minor>.<patch>, project 1-4
RELEASE_PATTERN = re.compile(r"v([1-4])\.(\d+)\.(\d+)", re.ASCII)


def parse_project(tag: str) -> int:
    """Get the project number from a release tag.

    Args:
        tag: Release tag, e.g. ``v1.2.0``

    Returns:
        Project number between 1 and 4

    Raises:
        ParseError: If the tag is not of the form v<1-4>.<minor>.<patch>
    """
    matched = RELEASE_PATTERN.fullmatch(tag or "")
    if matched is None:
        raise ParseError(tag)
    return int(matched.group(1))


class SubmissionType(str, Enum):
    """Kinds of graded deliverables."""

    FUNCTIONALITY = "Functionality"
    DESIGN = "Design"
