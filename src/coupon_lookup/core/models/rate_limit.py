"""Data models for rate limit decisions."""

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RateLimitDecision(BaseModel):
    """Outcome of a rate limit check for one caller."""

    model_config = ConfigDict(frozen=True)

    allowed: bool = Field(description="Whether the request may proceed")
    remaining: int = Field(description="Requests left in the current window")
    reset_at: datetime = Field(
        description="When the oldest counted request leaves the window"
    )
    limit: int = Field(description="Configured quota per window")
    recorded_at: datetime | None = Field(
        default=None,
        description="Timestamp recorded for this request, if one was",
    )

    def minutes_until_reset(self, now: datetime) -> int:
        """Whole minutes the caller should wait, rounded up."""
        seconds = (self.reset_at - now).total_seconds()
        if seconds <= 0:
            return 0
        return math.ceil(seconds / 60)
