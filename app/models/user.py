# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Shop profile mirroring a Supabase Auth account.

    `id` is the JWT `sub`, so there is no separate auth mapping table.
    Credentials stay in Supabase; guests simply have no row.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(primary_key=True, index=True)
    email: str = Field(unique=True, index=True)

    first_name: str = Field(max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    phone: str | None = Field(default=None, max_length=30)

    # "user" (customer) or "admin"
    role: str = Field(default="user", index=True)
    is_active: bool = True

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
