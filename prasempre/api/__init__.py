"""
API package initialization
"""

# Import all routers to make them available
from . import pages, billing, billing_webhook

__all__ = ["pages", "billing", "billing_webhook"]
