"""
Pydantic schemas for user registration and profile updates.
"""

from typing import Optional
from pydantic import EmailStr, Field, field_validator

from jobly.schemas.base import PayloadModel


class UserNew(PayloadModel):
    """Request schema for user registration."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=20)
    first_name: str = Field(..., min_length=1, max_length=30, alias="firstName")
    last_name: str = Field(..., min_length=1, max_length=30, alias="lastName")
    email: EmailStr
    is_admin: bool = Field(False, alias="isAdmin")


class UserUpdate(PayloadModel):
    """Partial profile update. A supplied password is re-hashed."""
    password: Optional[str] = Field(None, min_length=5, max_length=20)
    first_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="firstName")
    last_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="lastName")
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = Field(None, alias="isAdmin")

    @field_validator("password", "first_name", "last_name", "email", "is_admin")
    @classmethod
    def not_null(cls, v):
        # Columns are NOT NULL; only leaving a field out keeps it unchanged
        if v is None:
            raise ValueError("cannot be null")
        return v
