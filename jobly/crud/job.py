"""
CRUD operations for jobs.

Mirrors jobly.crud.company; jobs are keyed by a generated integer id and
must belong to an existing company.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobly.core.exceptions import NotFoundError, ReferentialError, ValidationError
from jobly.core.sql import BIND_PLACEHOLDER, WhereClause, bind_params, sql_for_partial_update
from jobly.schemas.base import parse_payload
from jobly.schemas.job import JobFilter, JobNew, JobUpdate

logger = logging.getLogger(__name__)

# JobUpdate only carries title/salary/equity, whose names match their columns
JOB_FIELD_MAP: Dict[str, str] = {}

JOB_COLUMNS = """id,
                 title,
                 salary,
                 equity,
                 company_handle"""


def row_to_job(row) -> Dict[str, Any]:
    """Convert a result row to a job record."""
    equity = row.equity
    if isinstance(equity, Decimal):
        equity = float(equity)
    return {
        "id": row.id,
        "title": row.title,
        "salary": row.salary,
        "equity": equity,
        "companyHandle": row.company_handle,
    }


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a job.

    Args:
        db: Database session
        data: {title, salary, equity, companyHandle}

    Returns:
        The created job record, including its generated id

    Raises:
        ValidationError: If the payload is invalid
        ReferentialError: If companyHandle does not name an existing company
    """
    job = parse_payload(JobNew, data)

    # Not atomic with the insert; a company deleted in between fails on the foreign key
    handle_check = db.execute(
        text("SELECT handle FROM companies WHERE handle = :handle"),
        {"handle": job.company_handle},
    ).first()
    if not handle_check:
        raise ReferentialError(f"No such company: {job.company_handle}")

    try:
        row = db.execute(
            text(f"""INSERT INTO jobs
                     (title, salary, equity, company_handle)
                     VALUES (:title, :salary, :equity, :company_handle)
                     RETURNING {JOB_COLUMNS}"""),
            {
                "title": job.title,
                "salary": job.salary,
                "equity": job.equity,
                "company_handle": job.company_handle,
            },
        ).one()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create job for {job.company_handle}: {e}")
        raise

    logger.info(f"Created job {row.id} for {job.company_handle}")
    return row_to_job(row)


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title.

    Args:
        db: Database session
        filters: Optional {title, minSalary, maxSalary, hasEquity}

    hasEquity=true keeps jobs with non-zero equity; false is the same as leaving it out.

    Raises:
        ValidationError: If a filter is unknown or malformed, or minSalary > maxSalary
    """
    q = parse_payload(JobFilter, filters)

    if (
        q.min_salary is not None
        and q.max_salary is not None
        and q.min_salary > q.max_salary
    ):
        raise ValidationError("minSalary cannot be greater than maxSalary")

    where = WhereClause()
    if q.title:
        where.contains("title", q.title)
    if q.min_salary is not None:
        where.add("salary >= {}", q.min_salary)
    if q.max_salary is not None:
        where.add("salary <= {}", q.max_salary)
    if q.has_equity:
        where.add_condition("equity > 0")

    rows = db.execute(
        text(f"""SELECT {JOB_COLUMNS}
                 FROM jobs
                 {where.sql}
                 ORDER BY title"""),
        where.params,
    ).all()

    return [row_to_job(row) for row in rows]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Get a job by id.

    Raises:
        NotFoundError: If no job has this id
    """
    row = db.execute(
        text(f"""SELECT {JOB_COLUMNS}
                 FROM jobs
                 WHERE id = :id"""),
        {"id": job_id},
    ).first()

    if not row:
        raise NotFoundError(f"No job: {job_id}")

    return row_to_job(row)


def update(db: Session, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    Only supplied fields change: {title, salary, equity}. The id and the
    company cannot be changed.

    Raises:
        ValidationError: If nothing is supplied or the payload is invalid
        NotFoundError: If no job has this id
    """
    changes = parse_payload(JobUpdate, data).to_data()
    set_cols, values = sql_for_partial_update(
        changes, JOB_FIELD_MAP, placeholder=BIND_PLACEHOLDER
    )
    id_var_idx = len(values) + 1

    query_sql = f"""UPDATE jobs
                    SET {set_cols}
                    WHERE id = :p{id_var_idx}
                    RETURNING {JOB_COLUMNS}"""
    try:
        row = db.execute(text(query_sql), bind_params([*values, job_id])).first()
        if not row:
            db.rollback()
            raise NotFoundError(f"No job: {job_id}")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update job {job_id}: {e}")
        raise

    logger.info(f"Updated job {job_id}: {', '.join(changes)}")
    return row_to_job(row)


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job.

    Raises:
        NotFoundError: If no job has this id
    """
    try:
        row = db.execute(
            text("DELETE FROM jobs WHERE id = :id RETURNING id"),
            {"id": job_id},
        ).first()
        if not row:
            db.rollback()
            raise NotFoundError(f"No job: {job_id}")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete job {job_id}: {e}")
        raise

    logger.info(f"Deleted job {job_id}")
