"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown on in-memory SQLite
- Seed data: companies c1-c3, jobs j1-j3, users u1-u2
"""

import os

# Must be set before jobly.core.config is imported
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite:///:memory:")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly import models  # noqa: F401 - register tables on Base.metadata
from jobly.core.database import Base, init_db
from jobly.crud import company as company_crud
from jobly.crud import job as job_crud
from jobly.crud import user as user_crud


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys (and ON DELETE CASCADE) unless asked."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped after the test completes.
    """
    init_db(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(db_session):
    """
    Database with three companies, three jobs, two users and one application.

    j1 and j2 belong to c1, j3 to c3; c2 has no jobs. u1 applied to j1.
    """
    for n in (1, 2, 3):
        company_crud.create(db_session, {
            "handle": f"c{n}",
            "name": f"C{n}",
            "numEmployees": n,
            "description": f"Desc{n}",
            "logoUrl": f"http://c{n}.img",
        })

    job_crud.create(db_session, {"title": "j1", "salary": 60000, "equity": 0, "companyHandle": "c1"})
    job_crud.create(db_session, {"title": "j2", "salary": 100000, "equity": 0.5, "companyHandle": "c1"})
    job_crud.create(db_session, {"title": "j3", "salary": 45000, "equity": 0.04, "companyHandle": "c3"})

    user_crud.register(db_session, {
        "username": "u1",
        "password": "password1",
        "firstName": "U1F",
        "lastName": "U1L",
        "email": "user1@user.com",
        "isAdmin": False,
    })
    user_crud.register(db_session, {
        "username": "u2",
        "password": "password2",
        "firstName": "U2F",
        "lastName": "U2L",
        "email": "user2@user.com",
        "isAdmin": True,
    })

    user_crud.apply_to_job(db_session, "u1", 1)

    return db_session
