"""
Grading module.

Computes release grades from the weekly late penalty.
"""

from .grader import GradeCalculator, GradeResult, format_datetime, parse_timestamp, weeks_late

__all__ = ["GradeCalculator", "GradeResult", "format_datetime", "parse_timestamp", "weeks_late"]
