"""
Follow-up Package

Follow-up eligibility policy and the scheduler that applies it.
"""

from .followup_policy import (
    FOLLOWUP_LIMITS,
    check_follow_up,
    follow_up_limit,
    is_eligible_for_follow_up,
    limits_from_config,
)
from .scheduler import FollowUpScheduler

__all__ = [
    "FOLLOWUP_LIMITS",
    "check_follow_up",
    "follow_up_limit",
    "is_eligible_for_follow_up",
    "limits_from_config",
    "FollowUpScheduler",
]
