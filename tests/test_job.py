"""
Test suite for job data access.

Tests cover:
- Job creation against existing and missing companies
- Filtered listing
- Retrieval, partial updates and deletion
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import text

from jobly.core.exceptions import NotFoundError, ReferentialError, ValidationError
from jobly.crud import job as job_crud


J1 = {"id": 1, "title": "j1", "salary": 60000, "equity": 0, "companyHandle": "c1"}
J2 = {"id": 2, "title": "j2", "salary": 100000, "equity": 0.5, "companyHandle": "c1"}
J3 = {"id": 3, "title": "j3", "salary": 45000, "equity": 0.04, "companyHandle": "c3"}


class TestJobCreate:
    """Tests for job_crud.create"""

    NEW_JOB = {"title": "new", "salary": 75000, "equity": 0.5, "companyHandle": "c1"}

    def test_create_job(self, seeded_db):
        job = job_crud.create(seeded_db, self.NEW_JOB)

        assert isinstance(job["id"], int)
        assert job == {"id": job["id"], **self.NEW_JOB}

        row = seeded_db.execute(
            text("SELECT title, salary, equity, company_handle FROM jobs WHERE id = :id"),
            {"id": job["id"]},
        ).one()
        assert tuple(row) == ("new", 75000, 0.5, "c1")

    def test_numeric_strings_are_coerced(self, seeded_db):
        job = job_crud.create(seeded_db, {**self.NEW_JOB, "salary": "80000"})

        assert job["salary"] == 80000

    def test_unknown_company(self, seeded_db):
        with pytest.raises(ReferentialError) as exc_info:
            job_crud.create(seeded_db, {**self.NEW_JOB, "companyHandle": "fake"})

        assert exc_info.value.status_code == 400
        assert seeded_db.execute(text("SELECT count(*) FROM jobs")).scalar() == 3

    def test_missing_fields(self, seeded_db):
        with pytest.raises(ValidationError):
            job_crud.create(seeded_db, {"title": "new", "salary": 10})

    def test_equity_above_one_rejected(self, seeded_db):
        with pytest.raises(ValidationError):
            job_crud.create(seeded_db, {**self.NEW_JOB, "equity": 1.5})


class TestJobFindAll:
    """Tests for job_crud.find_all"""

    def test_no_filter(self, seeded_db):
        assert job_crud.find_all(seeded_db) == [J1, J2, J3]

    def test_title_filter(self, seeded_db):
        assert job_crud.find_all(seeded_db, {"title": "J"}) == [J1, J2, J3]
        assert job_crud.find_all(seeded_db, {"title": "2"}) == [J2]

    def test_min_salary(self, seeded_db):
        assert job_crud.find_all(seeded_db, {"title": "j", "minSalary": 60000}) == [J1, J2]

    def test_max_salary(self, seeded_db):
        assert job_crud.find_all(seeded_db, {"maxSalary": 60000}) == [J1, J3]

    def test_has_equity(self, seeded_db):
        assert job_crud.find_all(seeded_db, {"hasEquity": True}) == [J2, J3]

    def test_has_equity_false_does_not_filter(self, seeded_db):
        assert job_crud.find_all(seeded_db, {"hasEquity": False}) == [J1, J2, J3]

    def test_has_equity_from_query_string(self, seeded_db):
        assert job_crud.find_all(seeded_db, {"hasEquity": "true"}) == [J2, J3]

    def test_all_filters(self, seeded_db):
        jobs = job_crud.find_all(
            seeded_db,
            {"title": "j", "minSalary": 60000, "maxSalary": 200000, "hasEquity": True},
        )
        assert jobs == [J2]

    def test_min_greater_than_max(self, seeded_db):
        with pytest.raises(ValidationError):
            job_crud.find_all(seeded_db, {"minSalary": 100, "maxSalary": 10})

    def test_min_greater_than_max_never_queries(self):
        db = MagicMock()

        with pytest.raises(ValidationError):
            job_crud.find_all(db, {"minSalary": 100, "maxSalary": 10})

        db.execute.assert_not_called()

    def test_unknown_filter(self, seeded_db):
        with pytest.raises(ValidationError):
            job_crud.find_all(seeded_db, {"min": 3})


class TestJobGet:
    """Tests for job_crud.get"""

    def test_get(self, seeded_db):
        assert job_crud.get(seeded_db, 1) == J1

    def test_not_found(self, seeded_db):
        with pytest.raises(NotFoundError):
            job_crud.get(seeded_db, 0)


class TestJobUpdate:
    """Tests for job_crud.update"""

    UPDATE_DATA = {"title": "New", "salary": 50000, "equity": 0}

    def test_update(self, seeded_db):
        job = job_crud.update(seeded_db, 1, self.UPDATE_DATA)

        assert job == {"id": 1, **self.UPDATE_DATA, "companyHandle": "c1"}

        row = seeded_db.execute(text("SELECT title, salary, equity FROM jobs WHERE id = 1")).one()
        assert tuple(row) == ("New", 50000, 0)

    def test_null_fields(self, seeded_db):
        job = job_crud.update(seeded_db, 1, {"title": "New", "salary": None, "equity": None})

        assert job == {"id": 1, "title": "New", "salary": None, "equity": None, "companyHandle": "c1"}

    def test_partial_update(self, seeded_db):
        job = job_crud.update(seeded_db, 1, {"title": "1-new"})

        assert job == {**J1, "title": "1-new"}

    def test_not_found(self, seeded_db):
        with pytest.raises(NotFoundError):
            job_crud.update(seeded_db, 0, self.UPDATE_DATA)

        assert job_crud.find_all(seeded_db, {"title": "New"}) == []

    def test_no_data(self, seeded_db):
        with pytest.raises(ValidationError):
            job_crud.update(seeded_db, 1, {})

    def test_company_cannot_change(self, seeded_db):
        with pytest.raises(ValidationError):
            job_crud.update(seeded_db, 1, {"companyHandle": "c2"})

        assert job_crud.get(seeded_db, 1)["companyHandle"] == "c1"

    def test_invalid_salary(self, seeded_db):
        with pytest.raises(ValidationError):
            job_crud.update(seeded_db, 1, {"salary": "not-a-salary"})


class TestJobRemove:
    """Tests for job_crud.remove"""

    def test_remove(self, seeded_db):
        job_crud.remove(seeded_db, 1)

        rows = seeded_db.execute(text("SELECT id FROM jobs WHERE id = 1")).all()
        assert rows == []

    def test_remove_cascades_to_applications(self, seeded_db):
        job_crud.remove(seeded_db, 1)

        rows = seeded_db.execute(text("SELECT job_id FROM applications WHERE job_id = 1")).all()
        assert rows == []

    def test_not_found(self, seeded_db):
        with pytest.raises(NotFoundError):
            job_crud.remove(seeded_db, 0)

        assert len(job_crud.find_all(seeded_db)) == 3
