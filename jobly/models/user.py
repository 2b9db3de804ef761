"""
User and application models.

An application links a user to a job they applied for.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, text
from jobly.core.database import Base


class User(Base):
    """Registered user. ``password`` holds the bcrypt hash."""
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=text("false"))

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"


class Application(Base):
    """A user's application to a job."""
    __tablename__ = "applications"

    username = Column(
        String(25),
        ForeignKey("users.username", ondelete="CASCADE"),
        primary_key=True,
    )
    job_id = Column(
        Integer,
        ForeignKey("jobs.id", ondelete="CASCADE"),
        primary_key=True,
    )

    def __repr__(self):
        return f"<Application(username='{self.username}', job_id={self.job_id})>"
