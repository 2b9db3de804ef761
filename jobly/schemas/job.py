from typing import Optional
from pydantic import Field, field_validator

from jobly.schemas.base import PayloadModel


class JobNew(PayloadModel):
    """Schema for creating a job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25, alias="companyHandle")


class JobUpdate(PayloadModel):
    """Schema for a partial job update. A job cannot move to another company."""
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("cannot be null")
        return v


class JobFilter(PayloadModel):
    """Query-string filters for listing jobs"""
    title: Optional[str] = None
    min_salary: Optional[int] = Field(None, ge=0, alias="minSalary")
    max_salary: Optional[int] = Field(None, ge=0, alias="maxSalary")
    has_equity: Optional[bool] = Field(None, alias="hasEquity")
