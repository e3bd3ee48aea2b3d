"""
Utility modules for the hierarchy engine.
"""

from .reporting_window import (
    DEFAULT_DEADLINE_HOUR,
    current_week_end,
    current_week_start,
    format_week_range,
    is_deadline_passed,
    is_this_week,
    report_deadline,
    week_bounds,
    resolve_timezone,
    as_aware,
)

__all__ = [
    'DEFAULT_DEADLINE_HOUR',
    'current_week_end',
    'current_week_start',
    'format_week_range',
    'is_deadline_passed',
    'is_this_week',
    'report_deadline',
    'week_bounds',
    'resolve_timezone',
    'as_aware',
]
