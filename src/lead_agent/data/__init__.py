"""
Data Package

Lead state models and the in-memory conversation store.
"""

from .models import Category, Stage, Role, Turn, LeadState

__all__ = [
    "Category",
    "Stage",
    "Role",
    "Turn",
    "LeadState",
]
