# app/routers/users.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth, require_admin
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    Role,
    UserActiveUpdate,
    UserRead,
    UserRoleUpdate,
    UserUpdate,
)
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

service = UserService(UserRepository())


@router.get("/me", response_model=UserRead)
def read_profile(me: User = Depends(require_auth)):
    """
    Profile of the caller.

    Works for customers and admins; the first call after sign-up also
    creates the row (see get_current_user).
    """
    return me


@router.patch("/me", response_model=UserRead)
def edit_profile(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    me: User = Depends(require_auth),
):
    """Only names and phone are editable here; email belongs to Supabase Auth."""
    return service.update_me(session, me, payload)


@router.get(
    "",
    response_model=list[UserRead],
    dependencies=[Depends(require_admin)],
)
def browse_users(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    role: Role | None = None,
):
    return service.list_users(session, skip, limit, role)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def user_detail(user_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.get_user(session, user_id)


@router.patch("/{user_id}/role", response_model=UserRead)
def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    """Promote or demote; an admin cannot demote themselves."""
    return service.update_role(session, admin, user_id, payload)


@router.patch("/{user_id}/active", response_model=UserRead)
def toggle_account(
    user_id: uuid.UUID,
    payload: UserActiveUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    # deactivated users get 403 from get_current_user on their next request
    return service.set_active(session, admin, user_id, payload)
