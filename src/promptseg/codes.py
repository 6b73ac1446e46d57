"""Outcome codes for a segment evaluation.

These constants prevent stringly-typed outcomes and let callers tell
apart the reasons a segment was not rendered.
"""

from enum import Enum


class SegmentOutcome(str, Enum):
    """Why a segment was (or was not) rendered."""

    RENDERED = "RENDERED"

    # Expected negatives (not errors)
    DISABLED = "DISABLED"
    EXCLUDED = "EXCLUDED"
    NOT_RELEVANT = "NOT_RELEVANT"
    RUNTIME_UNAVAILABLE = "RUNTIME_UNAVAILABLE"

    # Logged at warning level
    VERSION_UNPARSEABLE = "VERSION_UNPARSEABLE"
    FORMAT_ERROR = "FORMAT_ERROR"
