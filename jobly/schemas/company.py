"""
Pydantic schemas for company payloads and query-string filters.
"""

from typing import Optional
from pydantic import Field, field_validator

from jobly.schemas.base import PayloadModel


class CompanyNew(PayloadModel):
    """Schema for creating a company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    @field_validator("handle")
    @classmethod
    def handle_is_lowercase(cls, v: str) -> str:
        if v != v.lower():
            raise ValueError("handle must be lowercase")
        return v


class CompanyUpdate(PayloadModel):
    """Schema for a partial company update. The handle cannot change."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    @field_validator("name", "description")
    @classmethod
    def not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("cannot be null")
        return v


class CompanyFilter(PayloadModel):
    """Query-string filters for listing companies"""
    name: Optional[str] = None
    min_employees: Optional[int] = Field(None, ge=0, alias="minEmployees")
    max_employees: Optional[int] = Field(None, ge=0, alias="maxEmployees")
