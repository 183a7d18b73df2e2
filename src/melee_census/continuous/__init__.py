"""Checkpointed month-by-month harvesting."""

from melee_census.continuous.manager import MonthlyHarvester
from melee_census.continuous.state import (
    month_window,
    next_month,
    pending_months,
    read_checkpoint,
    resume_month,
)

__all__ = [
    "MonthlyHarvester",
    "month_window",
    "next_month",
    "pending_months",
    "read_checkpoint",
    "resume_month",
]
