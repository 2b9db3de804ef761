"""
Data-access operations for companies, jobs and users.

Each module takes the database session as the first argument of every
function; nothing here holds a global connection.
"""

from jobly.crud import company, job, user

__all__ = ["company", "job", "user"]
