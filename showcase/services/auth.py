"""
Authentication service for user login, token management, and password changes.
Handles JWT token generation, validation and owner account bootstrap.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from showcase.config import settings
from showcase.repositories.user import UserRepository
from showcase.models.user import User, UserRole
from showcase.utils.auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
)
from showcase.utils.exceptions import (
    APIException,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InactiveUserError,
    UnauthorizedError,
    ValidationError,
    BadRequestError,
)
from jose import ExpiredSignatureError, JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing logins and tokens.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def authenticate_user(self, login: str, password: str) -> User:
        """
        Authenticate user with username or email and password.

        Args:
            login: Username or email address
            password: Plain text password

        Returns:
            Authenticated User object

        Raises:
            InvalidCredentialsError: If credentials are invalid
            InactiveUserError: If user account is inactive
            ValidationError: If input validation fails
        """
        if not login or not login.strip():
            raise ValidationError("Username is required")

        if not password or not password.strip():
            raise ValidationError("Password is required")

        try:
            user = await self.user_repo.authenticate_user(login, password)
        except Exception as e:
            logger.error(f"Authentication error for {login}: {e}")
            raise InvalidCredentialsError()

        if not user:
            logger.warning(f"Failed authentication attempt for: {login}")
            raise InvalidCredentialsError()

        if not user.is_active:
            raise InactiveUserError()

        logger.info(f"User authenticated successfully: {user.username}")
        return user

    def create_tokens(self, user: User) -> Tuple[str, str]:
        """
        Create access and refresh tokens for user.

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access_token = create_access_token(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role
        )
        refresh_token = create_refresh_token(user_id=user.id, username=user.username)
        return access_token, refresh_token

    async def login(self, login: str, password: str) -> Tuple[User, str, str]:
        """
        Authenticate user and create tokens.

        Returns:
            Tuple of (user, access_token, refresh_token)
        """
        user = await self.authenticate_user(login, password)
        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Create new access token from refresh token.

        Raises:
            InvalidTokenError: If refresh token is invalid
            TokenExpiredError: If refresh token is expired
            InactiveUserError: If user account is inactive
        """
        user = await self._user_from_token(refresh_token, "refresh")
        return create_access_token(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role
        )

    async def get_current_user(self, token: str) -> User:
        """
        Get current user from access token.

        Raises:
            InvalidTokenError: If token is invalid or the user no longer exists
            TokenExpiredError: If token is expired
            InactiveUserError: If user account is inactive
        """
        return await self._user_from_token(token, "access")

    async def _user_from_token(self, token: str, token_type: str) -> User:
        try:
            payload = verify_token(token, token_type=token_type)
            user_id = uuid.UUID(payload.user_id)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except (JWTError, ValueError) as e:
            raise InvalidTokenError(str(e))

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise InvalidTokenError("User no longer exists")
        if not user.is_active:
            raise InactiveUserError()
        return user

    async def change_password(self, user: User, current_password: str, new_password: str) -> User:
        """
        Change the password of ``user`` after verifying the current one.

        Raises:
            InvalidCredentialsError: If current password is incorrect
            ValidationError: If the new password equals the current one
        """
        if not user.verify_password(current_password):
            raise InvalidCredentialsError("Current password is incorrect")

        if current_password == new_password:
            raise ValidationError("New password must differ from the current password")

        try:
            updated_user = await self.user_repo.update_password(user.id, new_password)
        except ValueError as e:
            raise ValidationError(str(e))
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to change password for user {user.id}: {e}")
            raise BadRequestError(f"Failed to change password: {str(e)}")

        if not updated_user:
            raise UnauthorizedError("User no longer exists")

        logger.info(f"Password changed for user: {user.username}")
        return updated_user

    async def ensure_owner_account(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None
    ) -> Optional[User]:
        """
        Create the owner account when a password is configured and the username is free.

        Returns:
            The created owner, or None when nothing was created
        """
        username = username or settings.owner_username
        password = password or settings.owner_password
        if not password:
            return None

        if await self.user_repo.get_by_username(username):
            return None

        owner = await self.user_repo.create_user({
            "username": username,
            "email": email or settings.owner_email,
            "password": password,
            "role": UserRole.OWNER,
            "is_active": True,
        })
        logger.info(f"Owner account created: {owner.username}")
        return owner
