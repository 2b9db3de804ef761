"""
Database models package.
"""

from jobly.models.company import Company
from jobly.models.job import Job
from jobly.models.user import User, Application

__all__ = ["Company", "Job", "User", "Application"]
