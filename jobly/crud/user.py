"""
CRUD operations for users and their job applications.

Passwords are stored as bcrypt hashes and never returned.
"""

import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobly.core.exceptions import DuplicateError, NotFoundError
from jobly.core.security import get_password_hash
from jobly.core.sql import BIND_PLACEHOLDER, bind_params, sql_for_partial_update
from jobly.schemas.base import parse_payload
from jobly.schemas.user import UserNew, UserUpdate

logger = logging.getLogger(__name__)

USER_FIELD_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}

USER_COLUMNS = """username,
                  first_name,
                  last_name,
                  email,
                  is_admin"""


def row_to_user(row) -> Dict[str, Any]:
    """Convert a result row to a user record (SQLite hands back 0/1 for booleans)."""
    return {
        "username": row.username,
        "firstName": row.first_name,
        "lastName": row.last_name,
        "email": row.email,
        "isAdmin": bool(row.is_admin),
    }


def register(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Register a user.

    Args:
        db: Database session
        data: {username, password, firstName, lastName, email, isAdmin}

    Returns:
        The user record, without the password

    Raises:
        ValidationError: If the payload is invalid
        DuplicateError: If the username is taken
    """
    user = parse_payload(UserNew, data)

    duplicate_check = db.execute(
        text("SELECT username FROM users WHERE username = :username"),
        {"username": user.username},
    ).first()
    if duplicate_check:
        raise DuplicateError(f"Duplicate username: {user.username}")

    hashed_password = get_password_hash(user.password)

    try:
        row = db.execute(
            text(f"""INSERT INTO users
                     (username, password, first_name, last_name, email, is_admin)
                     VALUES (:username, :password, :first_name, :last_name, :email, :is_admin)
                     RETURNING {USER_COLUMNS}"""),
            {
                "username": user.username,
                "password": hashed_password,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "email": user.email,
                "is_admin": user.is_admin,
            },
        ).one()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to register user {user.username}: {e}")
        raise

    logger.info(f"Registered user {user.username}")
    return row_to_user(row)


def find_all(db: Session) -> List[Dict[str, Any]]:
    """List all users ordered by username."""
    rows = db.execute(
        text(f"""SELECT {USER_COLUMNS}
                 FROM users
                 ORDER BY username""")
    ).all()
    return [row_to_user(row) for row in rows]


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Get a user with the ids of the jobs they applied to.

    Raises:
        NotFoundError: If no user has this username
    """
    row = db.execute(
        text(f"""SELECT {USER_COLUMNS}
                 FROM users
                 WHERE username = :username"""),
        {"username": username},
    ).first()

    if not row:
        raise NotFoundError(f"No user: {username}")

    user = row_to_user(row)

    application_rows = db.execute(
        text("""SELECT job_id
                FROM applications
                WHERE username = :username
                ORDER BY job_id"""),
        {"username": username},
    ).all()
    user["applications"] = [a.job_id for a in application_rows]

    return user


def update(db: Session, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user.

    Only supplied fields change: {firstName, lastName, password, email, isAdmin}.

    Raises:
        ValidationError: If nothing is supplied or the payload is invalid
        NotFoundError: If no user has this username
    """
    changes = parse_payload(UserUpdate, data).to_data()
    if "password" in changes:
        changes["password"] = get_password_hash(changes["password"])

    set_cols, values = sql_for_partial_update(
        changes, USER_FIELD_MAP, placeholder=BIND_PLACEHOLDER
    )
    username_var_idx = len(values) + 1

    query_sql = f"""UPDATE users
                    SET {set_cols}
                    WHERE username = :p{username_var_idx}
                    RETURNING {USER_COLUMNS}"""
    try:
        row = db.execute(text(query_sql), bind_params([*values, username])).first()
        if not row:
            db.rollback()
            raise NotFoundError(f"No user: {username}")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update user {username}: {e}")
        raise

    logger.info(f"Updated user {username}: {', '.join(changes)}")
    return row_to_user(row)


def remove(db: Session, username: str) -> None:
    """
    Delete a user and their applications.

    Raises:
        NotFoundError: If no user has this username
    """
    try:
        row = db.execute(
            text("DELETE FROM users WHERE username = :username RETURNING username"),
            {"username": username},
        ).first()
        if not row:
            db.rollback()
            raise NotFoundError(f"No user: {username}")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete user {username}: {e}")
        raise

    logger.info(f"Deleted user {username}")


def apply_to_job(db: Session, username: str, job_id: int) -> int:
    """
    Record that a user applied to a job.

    Returns:
        The job id

    Raises:
        NotFoundError: If the user or the job does not exist
        DuplicateError: If the user already applied to this job
    """
    user_check = db.execute(
        text("SELECT username FROM users WHERE username = :username"),
        {"username": username},
    ).first()
    if not user_check:
        raise NotFoundError(f"No user: {username}")

    job_check = db.execute(
        text("SELECT id FROM jobs WHERE id = :id"),
        {"id": job_id},
    ).first()
    if not job_check:
        raise NotFoundError(f"No job: {job_id}")

    existing = db.execute(
        text("""SELECT job_id
                FROM applications
                WHERE username = :username AND job_id = :job_id"""),
        {"username": username, "job_id": job_id},
    ).first()
    if existing:
        raise DuplicateError(f"{username} already applied to job {job_id}")

    try:
        db.execute(
            text("""INSERT INTO applications (username, job_id)
                    VALUES (:username, :job_id)"""),
            {"username": username, "job_id": job_check.id},
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to record application of {username} to job {job_id}: {e}")
        raise

    logger.info(f"{username} applied to job {job_id}")
    return job_check.id
