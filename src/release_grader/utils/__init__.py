"""
Utility module.

Logging with workflow command support, and the GitHub Actions
inputs, saved state, and failure signal.
"""

from .logging import (
    end_group,
    get_logger,
    log_group,
    mask_secret,
    setup_logging,
    show_error,
    start_group,
)
from .workflow import WorkflowState, get_input, restore_states, save_state, set_failed

__all__ = [
    "setup_logging",
    "get_logger",
    "log_group",
    "start_group",
    "end_group",
    "mask_secret",
    "show_error",
    "WorkflowState",
    "get_input",
    "restore_states",
    "save_state",
    "set_failed",
]
