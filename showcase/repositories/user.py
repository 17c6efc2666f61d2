"""
User repository for authentication and user management operations.
Provides secure user operations with password handling and role-based access.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from showcase.repositories.base import BaseRepository
from showcase.models.user import User, UserRole
from typing import Optional, List, Dict, Any, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user management with authentication support.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: username, email, password
                      Optional: role (defaults to USER), first_name, last_name, phone

        Returns:
            Created user instance

        Raises:
            ValueError: If validation fails or the username/email is taken
        """
        user_data = dict(user_data)
        email = User.validate_email_format(user_data["email"])
        username = user_data["username"].strip()

        if await self.get_by_email(email):
            raise ValueError(f"User with email {email} already exists")
        if await self.get_by_username(username):
            raise ValueError(f"User with username {username} already exists")

        password = user_data.pop("password")
        create_data = {
            **user_data,
            "username": username,
            "email": email,
            "hashed_password": User.hash_password(password),
            "role": user_data.get("role") or UserRole.USER,
            "is_active": user_data.get("is_active", True),
        }

        created_user = await self.create(create_data)
        logger.info(f"Created user: {created_user.username} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.get_by_field("email", email.strip().lower())

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self.get_by_field("username", username.strip())

    async def get_by_login(self, login: str) -> Optional[User]:
        """Look a user up by username or email address."""
        login = login.strip()
        query = select(User).where(or_(User.username == login, User.email == login.lower()))
        result = await self.db.execute(query)
        return result.scalars().first()

    async def authenticate_user(self, login: str, password: str) -> Optional[User]:
        """
        Authenticate user with username or email and password.

        Returns:
            User instance if the password matches, None otherwise
        """
        user = await self.get_by_login(login)
        if not user:
            logger.debug(f"Authentication failed - user not found: {login}")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed - invalid password for: {login}")
            return None

        return user

    async def update_password(self, user_id: uuid.UUID, new_password: str) -> Optional[User]:
        hashed_password = User.hash_password(new_password)
        return await self.update(user_id, {"hashed_password": hashed_password})

    async def search_users(
        self,
        role: Optional[UserRole] = None,
        is_active: Optional[bool] = None,
        search_term: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> Tuple[List[User], int]:
        """
        Search users by role, status and a username/email/name substring.

        Returns:
            Tuple of (users list, total count)
        """
        conditions = []
        if role is not None:
            conditions.append(User.role == role)
        if is_active is not None:
            conditions.append(User.is_active == is_active)
        if search_term:
            pattern = f"%{search_term.strip()}%"
            conditions.append(or_(
                User.username.ilike(pattern),
                User.email.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
            ))

        query = select(User).where(*conditions).order_by(User.created_at.desc()).offset(skip).limit(limit)
        count_query = select(func.count(User.id)).where(*conditions)

        users = list((await self.db.execute(query)).scalars().all())
        total = (await self.db.execute(count_query)).scalar() or 0
        return users, total

    async def count_by_role(self, role: UserRole) -> int:
        return await self.count(filters={"role": role})
