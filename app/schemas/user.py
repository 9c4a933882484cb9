# app/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# App-level roles. "guest" = no token, so we don't store it here.
Role = Literal["user", "admin"]


class UserRead(SQLModel):
    id: uuid.UUID
    email: EmailStr
    first_name: str
    last_name: str | None = None
    phone: str | None = None
    role: Role
    is_active: bool
    created_at: datetime


class UserUpdate(SQLModel):
    """
    Self-service profile edit; send only the fields to change.

    Email is owned by Supabase Auth and cannot be changed here.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    phone: str | None = Field(default=None, max_length=30)

    @field_validator("first_name")
    @classmethod
    def normalize_first_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("first_name cannot be empty")
        return v

    @field_validator("last_name", "phone")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class UserRoleUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    role: Role


class UserActiveUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    is_active: bool
