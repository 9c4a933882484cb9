# app/services/user_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.exceptions import NotFoundError
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import UserActiveUpdate, UserRoleUpdate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    Profile edits for everyone, account management for admins.

    Admins cannot demote or deactivate their own account.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits; only fields sent are applied.
        """
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(current_user, key, value)
        return self.repo.save(session, current_user)

    def list_users(
        self,
        session: Session,
        skip: int,
        limit: int,
        role: str | None = None,
    ) -> list[User]:
        return self.repo.list_users(session, skip=skip, limit=limit, role=role)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Raises:
            NotFoundError: no user with this id.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _forbid_self(acting_admin: User, user: User, action: str) -> None:
        if acting_admin.id == user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"You cannot {action} your own account",
            )

    def update_role(
        self,
        session: Session,
        acting_admin: User,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        """
        Change user's role. Role validation is enforced by the schema (Literal).
        """
        user = self.get_user(session, user_id)
        if payload.role != user.role:
            self._forbid_self(acting_admin, user, "change the role of")
        user.role = payload.role
        logger.info("User %s role set to %s by %s", user.id, user.role, acting_admin.id)
        return self.repo.save(session, user)

    def set_active(
        self,
        session: Session,
        acting_admin: User,
        user_id: uuid.UUID,
        payload: UserActiveUpdate,
    ) -> User:
        """
        Activate or deactivate an account. Deactivated users are rejected
        by the auth dependency on their next request.
        """
        user = self.get_user(session, user_id)
        if not payload.is_active:
            self._forbid_self(acting_admin, user, "deactivate")
        user.is_active = payload.is_active
        logger.info(
            "User %s is_active=%s set by %s", user.id, user.is_active, acting_admin.id
        )
        return self.repo.save(session, user)
