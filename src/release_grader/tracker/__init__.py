"""
Issue tracker module.

Talks to the GitHub REST API to find or create project milestones.
"""

from .api import GitHubAPI, create_api_client
from .milestones import MilestoneEnsurer, milestone_title
from .models import ApiResponse, Milestone

__all__ = [
    "GitHubAPI",
    "create_api_client",
    "MilestoneEnsurer",
    "milestone_title",
    "ApiResponse",
    "Milestone",
]
