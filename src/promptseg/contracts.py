"""Public result models for promptseg."""

from typing import Optional
from pydantic import BaseModel

from promptseg.codes import SegmentOutcome


class SegmentResult(BaseModel):
    """Outcome of evaluating one segment for one directory."""
    name: str  # "nodejs"
    outcome: SegmentOutcome
    output: Optional[str] = None  # rendered text; None means "omit the segment"
    version: Optional[str] = None  # trimmed runtime version, once fetched
    constraint: Optional[str] = None  # declared engines constraint, if any
    compatible: Optional[bool] = None  # None until the constraint check runs
    error: Optional[str] = None  # message for VERSION_UNPARSEABLE / FORMAT_ERROR

    @property
    def rendered(self) -> bool:
        return self.outcome is SegmentOutcome.RENDERED
