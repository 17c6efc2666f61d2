"""
User management service for the admin dashboard.
Applies the role rules for creating, changing and deleting accounts.
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from showcase.repositories.user import UserRepository
from showcase.models.user import User, UserRole, STAFF_ROLES
from showcase.schemas.user import UserCreate, UserUpdate
from showcase.utils.exceptions import (
    APIException,
    BadRequestError,
    DuplicateResourceError,
    ForbiddenError,
    InsufficientPermissionsError,
    UserNotFoundError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for staff-facing user management.
    Only an owner may touch admin or owner accounts.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def list_users(
        self,
        role: Optional[UserRole] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20
    ) -> Tuple[List[User], int]:
        skip = (page - 1) * page_size
        return await self.user_repo.search_users(
            role=role,
            is_active=is_active,
            search_term=search,
            skip=skip,
            limit=page_size
        )

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))
        return user

    async def create_user(self, user_data: UserCreate, current_user: User) -> User:
        """
        Create a new account.

        Raises:
            InsufficientPermissionsError: If a non-owner creates a staff account
            DuplicateResourceError: If the username or email is taken
        """
        if user_data.role in STAFF_ROLES and not current_user.is_owner:
            raise InsufficientPermissionsError(f"create {user_data.role.value} accounts")

        if await self.user_repo.get_by_username(user_data.username):
            raise DuplicateResourceError("User", user_data.username)
        if await self.user_repo.get_by_email(user_data.email):
            raise DuplicateResourceError("User", user_data.email)

        try:
            user = await self.user_repo.create_user(user_data.model_dump())
        except APIException:
            raise
        except ValueError as e:
            raise BadRequestError(str(e))
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise BadRequestError(f"Failed to create user: {str(e)}")

        logger.info(f"User created by {current_user.username}: {user.username} ({user.role.value})")
        return user

    async def update_user(self, user_id: uuid.UUID, user_data: UserUpdate, current_user: User) -> User:
        """
        Update profile, role or status of an account.

        Raises:
            UserNotFoundError: If user doesn't exist
            ForbiddenError: If the change breaks a role rule
        """
        target_user = await self.get_user(user_id)
        changes = user_data.model_dump(exclude_unset=True)

        self._check_can_manage(target_user, current_user, "modify")

        new_role = changes.get("role")
        if new_role is not None and new_role != target_user.role:
            if target_user.id == current_user.id:
                raise ForbiddenError("Users cannot change their own role")
            if new_role in STAFF_ROLES and not current_user.is_owner:
                raise InsufficientPermissionsError(f"grant the {new_role.value} role")

        if changes.get("is_active") is False and target_user.id == current_user.id:
            raise ForbiddenError("Users cannot deactivate their own account")

        new_email = changes.get("email")
        if new_email and new_email != target_user.email:
            existing = await self.user_repo.get_by_email(new_email)
            if existing and existing.id != target_user.id:
                raise DuplicateResourceError("User", new_email)

        try:
            updated_user = await self.user_repo.update(user_id, changes)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update user {user_id}: {e}")
            raise BadRequestError(f"Failed to update user: {str(e)}")

        logger.info(f"User {target_user.username} updated by {current_user.username}")
        return updated_user

    async def delete_user(self, user_id: uuid.UUID, current_user: User) -> None:
        """
        Delete an account.

        Raises:
            UserNotFoundError: If user doesn't exist
            ForbiddenError: If users delete themselves or a non-owner deletes staff
        """
        target_user = await self.get_user(user_id)

        if target_user.id == current_user.id:
            raise ForbiddenError("Users cannot delete their own account")

        self._check_can_manage(target_user, current_user, "delete")

        await self.user_repo.delete(user_id)
        logger.info(f"User {target_user.username} deleted by {current_user.username}")

    @staticmethod
    def _check_can_manage(target_user: User, current_user: User, action: str) -> None:
        if target_user.is_staff and target_user.id != current_user.id and not current_user.is_owner:
            raise InsufficientPermissionsError(f"{action} {target_user.role.value} accounts")
