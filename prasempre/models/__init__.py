"""
Model package initialization
"""

from .page import Page, PageType, PageStatus
from .activity import Activity

__all__ = [
    # Core models
    "Page",
    "Activity",

    # Enums
    "PageType",
    "PageStatus",
]
