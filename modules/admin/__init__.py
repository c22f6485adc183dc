"""
Admin module.

Dashboard counts and moderation of users and posts.
"""

from .service import AdminService
from .models import DashboardStats, PublishRequest

__all__ = [
    "AdminService",
    "DashboardStats",
    "PublishRequest",
]
