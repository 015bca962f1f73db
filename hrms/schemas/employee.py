"""Pydantic schemas for the employee directory."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be empty")
    if len(v) > 100:
        raise ValueError("Name must not exceed 100 characters")
    return v


class EmployeeCreate(BaseModel):
    first_name: str
    last_name: str
    email: str | None = None
    department: str | None = None
    role: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class EmployeeUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    department: str | None = None
    role: str | None = None
    is_active: bool | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return None if v is None else _clean_name(v)


class EmployeeRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str | None
    department: str | None
    role: str | None
    is_active: bool
    created_at: datetime | None

    model_config = {"from_attributes": True}
