"""
Release Grader

Grades timed project releases inside a GitHub Actions workflow: parses the
project from the release tag, applies the weekly late penalty against the
configured deadline, and keeps a milestone per project in the repository.
"""

__version__ = "0.1.0"
