"""
CRUD operations for companies.

Every function takes the database session as its first argument. Queries are
raw SQL bound through sqlalchemy.text(); partial updates and list filters are
built with the helpers in jobly.core.sql.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobly.core.exceptions import DuplicateError, NotFoundError, ValidationError
from jobly.core.sql import BIND_PLACEHOLDER, WhereClause, bind_params, sql_for_partial_update
from jobly.crud.job import JOB_COLUMNS, row_to_job
from jobly.schemas.base import parse_payload
from jobly.schemas.company import CompanyFilter, CompanyNew, CompanyUpdate

logger = logging.getLogger(__name__)

# Field names whose column name differs
COMPANY_FIELD_MAP = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

COMPANY_COLUMNS = """handle,
                     name,
                     description,
                     num_employees,
                     logo_url"""


def row_to_company(row) -> Dict[str, Any]:
    """Convert a result row to a company record."""
    return {
        "handle": row.handle,
        "name": row.name,
        "description": row.description,
        "numEmployees": row.num_employees,
        "logoUrl": row.logo_url,
    }


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a company.

    Args:
        db: Database session
        data: {handle, name, description, numEmployees, logoUrl}

    Returns:
        The created company record

    Raises:
        ValidationError: If the payload is invalid
        DuplicateError: If the handle or the name is already taken
    """
    company = parse_payload(CompanyNew, data)

    duplicate_check = db.execute(
        text("SELECT handle, name FROM companies WHERE handle = :handle OR name = :name"),
        {"handle": company.handle, "name": company.name},
    ).first()
    if duplicate_check:
        if duplicate_check.handle == company.handle:
            raise DuplicateError(f"Duplicate company: {company.handle}")
        raise DuplicateError(f"Duplicate company name: {company.name}")

    try:
        row = db.execute(
            text(f"""INSERT INTO companies
                     (handle, name, description, num_employees, logo_url)
                     VALUES (:handle, :name, :description, :num_employees, :logo_url)
                     RETURNING {COMPANY_COLUMNS}"""),
            {
                "handle": company.handle,
                "name": company.name,
                "description": company.description,
                "num_employees": company.num_employees,
                "logo_url": company.logo_url,
            },
        ).one()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create company {company.handle}: {e}")
        raise

    logger.info(f"Created company {company.handle}")
    return row_to_company(row)


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name.

    Args:
        db: Database session
        filters: Optional {name, minEmployees, maxEmployees}; all supplied filters must match

    Raises:
        ValidationError: If a filter is unknown or malformed, or minEmployees > maxEmployees
    """
    q = parse_payload(CompanyFilter, filters)

    if (
        q.min_employees is not None
        and q.max_employees is not None
        and q.min_employees > q.max_employees
    ):
        raise ValidationError("minEmployees cannot be greater than maxEmployees")

    where = WhereClause()
    if q.name:
        where.contains("name", q.name)
    if q.min_employees is not None:
        where.add("num_employees >= {}", q.min_employees)
    if q.max_employees is not None:
        where.add("num_employees <= {}", q.max_employees)

    rows = db.execute(
        text(f"""SELECT {COMPANY_COLUMNS}
                 FROM companies
                 {where.sql}
                 ORDER BY name"""),
        where.params,
    ).all()

    return [row_to_company(row) for row in rows]


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Get a company with its jobs.

    Returns:
        Company record with ``jobs``: [{id, title, salary, equity, companyHandle}, ...]

    Raises:
        NotFoundError: If no company has this handle
    """
    row = db.execute(
        text(f"""SELECT {COMPANY_COLUMNS}
                 FROM companies
                 WHERE handle = :handle"""),
        {"handle": handle},
    ).first()

    if not row:
        raise NotFoundError(f"No company: {handle}")

    company = row_to_company(row)

    job_rows = db.execute(
        text(f"""SELECT {JOB_COLUMNS}
                 FROM jobs
                 WHERE company_handle = :handle
                 ORDER BY id"""),
        {"handle": handle},
    ).all()
    company["jobs"] = [row_to_job(job_row) for job_row in job_rows]

    return company


def update(db: Session, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company.

    Only supplied fields change: {name, description, numEmployees, logoUrl}.

    Raises:
        ValidationError: If nothing is supplied or the payload is invalid
        NotFoundError: If no company has this handle
        DuplicateError: If another company already has the new name
    """
    changes = parse_payload(CompanyUpdate, data).to_data()
    if "name" in changes:
        name_check = db.execute(
            text("SELECT handle FROM companies WHERE name = :name AND handle <> :handle"),
            {"name": changes["name"], "handle": handle},
        ).first()
        if name_check:
            raise DuplicateError(f"Duplicate company name: {changes['name']}")

    set_cols, values = sql_for_partial_update(
        changes, COMPANY_FIELD_MAP, placeholder=BIND_PLACEHOLDER
    )
    handle_var_idx = len(values) + 1

    query_sql = f"""UPDATE companies
                    SET {set_cols}
                    WHERE handle = :p{handle_var_idx}
                    RETURNING {COMPANY_COLUMNS}"""
    try:
        row = db.execute(text(query_sql), bind_params([*values, handle])).first()
        if not row:
            db.rollback()
            raise NotFoundError(f"No company: {handle}")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update company {handle}: {e}")
        raise

    logger.info(f"Updated company {handle}: {', '.join(changes)}")
    return row_to_company(row)


def remove(db: Session, handle: str) -> None:
    """
    Delete a company. Its jobs are removed by the foreign key cascade.

    Raises:
        NotFoundError: If no company has this handle
    """
    try:
        row = db.execute(
            text("DELETE FROM companies WHERE handle = :handle RETURNING handle"),
            {"handle": handle},
        ).first()
        if not row:
            db.rollback()
            raise NotFoundError(f"No company: {handle}")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete company {handle}: {e}")
        raise

    logger.info(f"Deleted company {handle}")
