"""
Follow-up Policy

Decides whether an automated follow-up may be sent to a lead.
"""

from datetime import datetime, timedelta
from typing import Mapping, Optional

from ..data.models import Category, LeadState

# Max automated follow-ups per category
FOLLOWUP_LIMITS: dict[Category, int] = {
    Category.HOT: 8,
    Category.WARM: 5,
    Category.COLD: 3,
}


def limits_from_config(limits: Mapping[str, int]) -> dict[Category, int]:
    """Turn a {"hot": n, ...} mapping into a category-keyed limit table."""
    table = dict(FOLLOWUP_LIMITS)
    for category in Category:
        if category.value in limits:
            table[category] = int(limits[category.value])
    return table


def follow_up_limit(category: Category, limits: Optional[Mapping[Category, int]] = None) -> int:
    """Limit for a category, looked up fresh on every call."""
    table = limits if limits is not None else FOLLOWUP_LIMITS
    return table[category]


def check_follow_up(
    state: LeadState,
    now: datetime,
    min_interval_minutes: float,
    limits: Optional[Mapping[Category, int]] = None,
) -> tuple[bool, str]:
    """
    Check follow-up eligibility.

    Returns:
        (eligible, reason)
    """
    if state.dnc_flag:
        return False, "Lead opted out (DNC)"

    limit = follow_up_limit(state.category, limits)
    if state.follow_up_count >= limit:
        return False, f"Follow-up limit reached for {state.category.value} ({state.follow_up_count}/{limit})"

    last_contact = state.last_contact_at
    if last_contact is None:
        return False, "No prior contact to measure from"

    elapsed = now - last_contact
    if elapsed < timedelta(minutes=min_interval_minutes):
        return False, f"Last contact {int(elapsed.total_seconds())}s ago"

    return True, ""


def is_eligible_for_follow_up(
    state: LeadState,
    now: datetime,
    min_interval_minutes: float,
    limits: Optional[Mapping[Category, int]] = None,
) -> bool:
    """True if DNC is off, the category limit is not reached and the interval has passed."""
    eligible, _ = check_follow_up(state, now, min_interval_minutes, limits)
    return eligible
